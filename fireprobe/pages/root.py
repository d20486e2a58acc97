"""Console page: connection form, one panel per subsystem, and the live log."""

from html import escape

_FONTS_CSS_URL = (
    "https://fonts.googleapis.com/css2?family=DM+Sans:wght@400;500;600"
    "&family=JetBrains+Mono:wght@400;500&display=swap"
)


def render_root_page(app_name: str, mfa_anchor_id: str = "mfa-recaptcha") -> str:
    """Return HTML for the console page (all actions go through /api/v1)."""
    title = escape(app_name)
    anchor = escape(mfa_anchor_id)
    return f"""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <link rel="preconnect" href="https://fonts.googleapis.com">
    <link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
    <link href="{_FONTS_CSS_URL}" rel="stylesheet">
    <style>
        * {{ box-sizing: border-box; }}
        body {{
            font-family: 'DM Sans', system-ui, sans-serif;
            margin: 0;
            background: #000;
            color: #e0e0e0;
        }}
        header {{
            padding: 1rem 1.5rem;
            border-bottom: 1px solid #1a1a1a;
            display: flex;
            justify-content: space-between;
            align-items: baseline;
        }}
        header h1 {{ font-size: 1.25rem; margin: 0; color: #fff; }}
        #status {{ font-family: 'JetBrains Mono', monospace; font-size: 0.8125rem; color: #888; }}
        main {{
            display: grid;
            grid-template-columns: minmax(320px, 1fr) minmax(320px, 1fr);
            gap: 1rem;
            padding: 1rem 1.5rem;
        }}
        .card {{
            background: #0c0c0c;
            border: 1px solid #1a1a1a;
            padding: 1rem 1.25rem;
            margin-bottom: 1rem;
        }}
        .card h2 {{
            font-size: 0.75rem;
            font-weight: 600;
            text-transform: uppercase;
            letter-spacing: 0.08em;
            color: #666;
            margin: 0 0 0.75rem 0;
        }}
        input, select, textarea, button {{
            font: inherit;
            background: #111;
            color: #e0e0e0;
            border: 1px solid #262626;
            padding: 0.4rem 0.6rem;
            margin: 0 0.25rem 0.5rem 0;
        }}
        textarea {{ width: 100%; font-family: 'JetBrains Mono', monospace; font-size: 0.8125rem; }}
        button {{ cursor: pointer; background: #222; }}
        button:hover {{ background: #2a2a2a; }}
        #log {{
            font-family: 'JetBrains Mono', monospace;
            font-size: 0.8125rem;
            max-height: 80vh;
            overflow-y: auto;
        }}
        .entry {{ border-bottom: 1px solid #151515; padding: 0.4rem 0; white-space: pre-wrap; }}
        .entry .time {{ color: #555; margin-right: 0.5rem; }}
        .entry.success {{ color: #8fd18f; }}
        .entry.error {{ color: #f08080; }}
        .entry.info {{ color: #9ab; }}
        .entry pre {{ background: #111; padding: 0.4rem; margin: 0.25rem 0; overflow-x: auto; }}
        #preview {{ color: #888; white-space: pre-wrap; font-family: 'JetBrains Mono', monospace; font-size: 0.75rem; }}
    </style>
</head>
<body>
    <header>
        <h1>{title}</h1>
        <span id="status">not initialized</span>
    </header>
    <main>
        <div>
            <section class="card">
                <h2>Connection</h2>
                <textarea id="config" rows="7" placeholder="Paste firebaseConfig {{ apiKey: ..., projectId: ... }}"></textarea>
                <button onclick="initialize()">Initialize</button>
            </section>

            <section class="card">
                <h2>Auth</h2>
                <input id="email" placeholder="email">
                <input id="password" type="password" placeholder="password">
                <div>
                    <button onclick="post('/auth/sign-in', creds())">Sign in</button>
                    <button onclick="post('/auth/sign-up', creds())">Sign up</button>
                    <button onclick="post('/auth/sign-out', {{}})">Sign out</button>
                </div>
                <input id="id-token" placeholder="Google OAuth ID token">
                <button onclick="post('/auth/federated', {{id_token: val('id-token')}})">Google sign-in</button>
                <div>
                    <input id="mfa-code" placeholder="MFA code">
                    <button onclick="post('/auth/mfa/verify', {{code: val('mfa-code')}})">Verify</button>
                    <button onclick="post('/auth/mfa/cancel', {{}})">Cancel</button>
                </div>
                <div id="{anchor}"></div>
            </section>

            <section class="card">
                <h2>Firestore</h2>
                <input id="collection" placeholder="collection path">
                <select id="action"><option>get</option><option>set</option><option>update</option><option>delete</option></select>
                <input id="doc-id" placeholder="document id">
                <textarea id="json-body" rows="3" placeholder="{{ field: 'value' }}"></textarea>
                <input id="limit" type="number" value="100">
                <input id="sort-field" placeholder="sort field">
                <select id="sort-direction"><option>asc</option><option>desc</option></select>
                <input id="filter-field" placeholder="filter field">
                <input id="filter-op" placeholder="==">
                <input id="filter-value" placeholder="value">
                <label><input id="merge" type="checkbox"> merge</label>
                <button onclick="firestore()">Run</button>
            </section>

            <section class="card">
                <h2>Cloud Functions</h2>
                <input id="expression" placeholder="myFunction({{ a: 1 }})" size="40">
                <button onclick="post('/functions/callable', {{expression: val('expression')}})">Invoke</button>
                <button onclick="preview()">Preview</button>
                <div>
                    <input id="fn-name" placeholder="HTTP function name">
                    <select id="fn-method"><option>GET</option><option>POST</option></select>
                    <input id="fn-args" placeholder="{{ q: 1 }} or a=1&amp;b=2">
                    <button onclick="post('/functions/http', {{name: val('fn-name'), method: val('fn-method'), arguments: val('fn-args')}})">Call</button>
                </div>
                <div id="preview"></div>
            </section>

            <section class="card">
                <h2>Storage</h2>
                <input id="blob-path" placeholder="path">
                <select id="blob-action">
                    <option>list</option><option>upload</option><option>download</option>
                    <option>delete</option><option>get-metadata</option>
                </select>
                <input id="blob-limit" type="number" value="100">
                <input id="blob-file" type="file">
                <button onclick="storage()">Run</button>
            </section>
        </div>

        <section class="card">
            <h2>Output</h2>
            <button onclick="clearLog()">Clear</button>
            <button onclick="copyLog()">Copy</button>
            <div id="log"></div>
        </section>
    </main>
    <script>
        var API = '/api/v1';
        function val(id) {{ return document.getElementById(id).value; }}
        function creds() {{ return {{email: val('email'), password: val('password')}}; }}

        async function post(path, body) {{
            var resp = await fetch(API + path, {{
                method: 'POST',
                headers: {{'Content-Type': 'application/json'}},
                body: JSON.stringify(body)
            }});
            if (!resp.ok) {{
                var err = await resp.json().catch(function () {{ return {{message: resp.statusText}}; }});
                alert(err.message || resp.statusText);
            }}
            refresh();
            return resp;
        }}

        function initialize() {{ post('/session/literal', {{config: val('config')}}); }}

        function firestore() {{
            post('/firestore', {{
                collection_path: val('collection'),
                action: val('action'),
                document_id: val('doc-id'),
                json_body: val('json-body'),
                limit: parseInt(val('limit') || '0', 10),
                sort_field: val('sort-field'),
                sort_direction: val('sort-direction'),
                filter_field: val('filter-field'),
                filter_operator: val('filter-op'),
                filter_value: val('filter-value'),
                merge_on_set: document.getElementById('merge').checked
            }});
        }}

        async function preview() {{
            var resp = await post('/functions/preview', {{kind: 'callable', expression: val('expression')}});
            if (resp.ok) document.getElementById('preview').textContent = (await resp.json()).preview;
        }}

        async function storage() {{
            var form = new FormData();
            form.append('action', val('blob-action'));
            form.append('path', val('blob-path'));
            form.append('limit', val('blob-limit') || '100');
            var file = document.getElementById('blob-file').files[0];
            if (file) form.append('file', file);
            await fetch(API + '/storage', {{method: 'POST', body: form}});
            refresh();
        }}

        async function clearLog() {{
            await fetch(API + '/log', {{method: 'DELETE'}});
            refresh();
        }}

        async function copyLog() {{
            var text = await (await fetch(API + '/log?format=text')).text();
            navigator.clipboard.writeText(text);
        }}

        function renderEntry(entry) {{
            var div = document.createElement('div');
            div.className = 'entry ' + entry.classification;
            var time = document.createElement('span');
            time.className = 'time';
            time.textContent = entry.timestamp;
            div.appendChild(time);
            entry.parts.forEach(function (part) {{
                var node = document.createElement(part.is_json ? 'pre' : 'span');
                node.textContent = part.text;
                div.appendChild(node);
            }});
            return div;
        }}

        async function refresh() {{
            var log = await (await fetch(API + '/log')).json();
            var el = document.getElementById('log');
            el.replaceChildren.apply(el, log.entries.map(renderEntry));
            el.scrollTop = el.scrollHeight;
            var session = await (await fetch(API + '/session')).json();
            var who = session.principal ? (session.principal.email || session.principal.uid) : 'anonymous';
            document.getElementById('status').textContent = session.initialized
                ? session.project_id + ' · ' + who + ' · ' + session.auth_state
                : 'not initialized';
        }}

        refresh();
        setInterval(refresh, 1500);
    </script>
</body>
</html>
""".strip()
