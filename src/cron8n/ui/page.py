"""Single-page HTML for the web UI (Bootstrap from CDN, vanilla JS against /api)."""

from .. import __version__

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en" data-bs-theme="dark">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>cron8n - Workflow Manager</title>
  <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css" rel="stylesheet">
  <style>
    body { background: #121212; color: #e0e0e0; min-height: 100vh; }
    .navbar, .card, .modal-content { background: #1e1e1e !important; border-color: #333; }
    .card:hover { border-color: #3b82f6; }
    .cron { font-family: monospace; background: #2a2a2a; color: #3b82f6; }
    .next-runs { font-size: 0.85em; color: #a0a0a0; }
  </style>
</head>
<body>
<nav class="navbar navbar-dark border-bottom mb-4">
  <div class="container">
    <span class="navbar-brand fw-bold">cron8n <small class="text-secondary fs-6">v__VERSION__</small></span>
    <div>
      <span id="auth-status" class="badge bg-secondary me-2">checking...</span>
      <button class="btn btn-sm btn-outline-light" data-bs-toggle="modal" data-bs-target="#auth-modal">Connection</button>
      <button class="btn btn-sm btn-primary" onclick="openCreate()">New workflow</button>
    </div>
  </div>
</nav>

<main class="container">
  <div id="workflows" class="row g-3"></div>
  <p id="empty" class="text-secondary d-none">No workflows yet. Create one with "New workflow".</p>
</main>

<div class="modal fade" id="auth-modal" tabindex="-1">
  <div class="modal-dialog"><div class="modal-content">
    <div class="modal-header"><h5 class="modal-title">n8n connection</h5></div>
    <div class="modal-body">
      <label class="form-label">Base URL</label>
      <input id="auth-url" class="form-control mb-2" placeholder="https://n8n.example.com">
      <label class="form-label">Auth mode</label>
      <select id="auth-mode" class="form-select mb-2">
        <option value="apiKey">API key (X-N8N-API-KEY)</option>
        <option value="bearerToken">Bearer token</option>
      </select>
      <label class="form-label">Secret</label>
      <input id="auth-secret" type="password" class="form-control">
    </div>
    <div class="modal-footer">
      <button class="btn btn-outline-danger me-auto" onclick="logout()">Logout</button>
      <button class="btn btn-primary" onclick="login()">Save</button>
    </div>
  </div></div>
</div>

<div class="modal fade" id="edit-modal" tabindex="-1">
  <div class="modal-dialog"><div class="modal-content">
    <div class="modal-header"><h5 class="modal-title" id="edit-title">New workflow</h5></div>
    <div class="modal-body">
      <input id="edit-slug" type="hidden">
      <label class="form-label">Name</label>
      <input id="edit-name" class="form-control mb-2">
      <div id="template-group">
        <label class="form-label">Template</label>
        <select id="edit-template" class="form-select mb-2" onchange="toggleShell()"></select>
      </div>
      <label class="form-label">Cron expression</label>
      <div class="input-group mb-1">
        <input id="edit-cron" class="form-control cron" oninput="checkCron()">
        <select id="edit-preset" class="form-select" onchange="applyPreset()"><option value="">Presets</option></select>
      </div>
      <div id="cron-feedback" class="next-runs mb-2"></div>
      <label class="form-label">Timezone</label>
      <select id="edit-timezone" class="form-select mb-2" onchange="checkCron()"></select>
      <div id="shell-group" class="d-none">
        <label class="form-label">Shell command</label>
        <input id="edit-shell" class="form-control cron">
      </div>
    </div>
    <div class="modal-footer">
      <button class="btn btn-primary" onclick="saveWorkflow()">Save</button>
    </div>
  </div></div>
</div>

<div class="toast-container position-fixed bottom-0 end-0 p-3"><div id="toast" class="toast"><div class="toast-body"></div></div></div>

<script src="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/js/bootstrap.bundle.min.js"></script>
<script>
const $ = (id) => document.getElementById(id);
let workflows = [];

async function api(method, url, body) {
  const options = { method, headers: { 'Content-Type': 'application/json' } };
  if (body !== undefined) options.body = JSON.stringify(body);
  const res = await fetch(url, options);
  const data = await res.json();
  if (!res.ok) throw new Error(data.error + (data.hint ? ' (' + data.hint + ')' : ''));
  return data;
}

function toast(message, ok = true) {
  const el = $('toast');
  el.className = 'toast text-bg-' + (ok ? 'success' : 'danger');
  el.querySelector('.toast-body').textContent = message;
  bootstrap.Toast.getOrCreateInstance(el).show();
}

function escapeHtml(text) {
  const div = document.createElement('div');
  div.textContent = text == null ? '' : String(text);
  return div.innerHTML;
}

async function loadAuth() {
  const auth = await api('GET', '/api/auth');
  const badge = $('auth-status');
  badge.textContent = auth.authenticated ? auth.baseUrl : 'not connected';
  badge.className = 'badge me-2 ' + (auth.authenticated ? 'bg-success' : 'bg-warning text-dark');
  if (auth.authenticated) { $('auth-url').value = auth.baseUrl; $('auth-mode').value = auth.authMode; }
}

async function login() {
  try {
    await api('POST', '/api/auth', { baseUrl: $('auth-url').value, authMode: $('auth-mode').value, secret: $('auth-secret').value });
    bootstrap.Modal.getInstance($('auth-modal')).hide();
    toast('Connected');
    await refresh();
  } catch (e) { toast(e.message, false); }
}

async function logout() {
  await api('DELETE', '/api/auth');
  bootstrap.Modal.getInstance($('auth-modal')).hide();
  toast('Logged out');
  await refresh();
}

function card(item) {
  const m = item.manifest, w = item.workflow;
  const deployed = !!m.lastDeployedWorkflowId;
  const shell = (w.nodes || []).find(n => n.type === 'n8n-nodes-base.executeCommand');
  return `<div class="col-md-6 col-lg-4"><div class="card h-100"><div class="card-body">
    <h5 class="card-title">${escapeHtml(m.name)}</h5>
    <div class="mb-2"><code>${escapeHtml(m.slug)}</code>
      <span class="badge ${deployed ? 'bg-success' : 'bg-warning text-dark'}">${deployed ? 'deployed' : 'local'}</span>
      ${deployed ? `<span class="badge ${w.active ? 'bg-success' : 'bg-secondary'}">${w.active ? 'active' : 'inactive'}</span>` : ''}
    </div>
    <div><span class="badge cron">${escapeHtml(m.cronExpression)}</span> <small class="text-secondary">${escapeHtml(m.timezone)}</small></div>
    ${shell ? `<div class="mt-2"><code class="small">${escapeHtml(shell.parameters.command)}</code></div>` : ''}
  </div><div class="card-footer d-flex gap-1">
    <button class="btn btn-sm btn-outline-light" onclick="openEdit('${m.slug}')">Edit</button>
    <button class="btn btn-sm btn-primary" onclick="deploy('${m.slug}')">Deploy</button>
    ${deployed ? `<button class="btn btn-sm btn-outline-success" onclick="toggleActive('${m.slug}', ${!w.active})">${w.active ? 'Deactivate' : 'Activate'}</button>` : ''}
    <button class="btn btn-sm btn-outline-danger ms-auto" onclick="archive('${m.slug}')">Archive</button>
  </div></div></div>`;
}

async function refresh() {
  await loadAuth();
  const data = await api('GET', '/api/workflows');
  workflows = data.workflows;
  $('workflows').innerHTML = workflows.map(card).join('');
  $('empty').classList.toggle('d-none', workflows.length > 0);
}

async function loadOptions() {
  const [templates, presets, zones] = await Promise.all([
    api('GET', '/api/templates'), api('GET', '/api/cron-presets'), api('GET', '/api/timezones'),
  ]);
  $('edit-template').innerHTML = templates.templates.map(t => `<option value="${t.value}" title="${escapeHtml(t.description)}">${escapeHtml(t.name)}</option>`).join('');
  $('edit-preset').innerHTML += presets.presets.map(p => `<option value="${p.expression}">${escapeHtml(p.description)}</option>`).join('');
  $('edit-timezone').innerHTML = zones.timezones.map(z => `<option>${z}</option>`).join('');
}

function toggleShell() {
  $('shell-group').classList.toggle('d-none', $('edit-template').value !== 'shell-command');
}

function applyPreset() {
  if ($('edit-preset').value) { $('edit-cron').value = $('edit-preset').value; checkCron(); }
}

async function checkCron() {
  const result = await api('POST', '/api/validate-cron', { expression: $('edit-cron').value, timezone: $('edit-timezone').value });
  $('cron-feedback').innerHTML = result.isValid
    ? 'Next: ' + result.nextRuns.slice(0, 3).map(r => escapeHtml(new Date(r).toLocaleString())).join(' &middot; ')
    : '<span class="text-danger">' + escapeHtml(result.error) + '</span>';
}

function openCreate() {
  $('edit-title').textContent = 'New workflow';
  $('edit-slug').value = '';
  $('edit-name').value = '';
  $('edit-cron').value = '0 * * * *';
  $('edit-shell').value = '';
  $('template-group').classList.remove('d-none');
  toggleShell();
  checkCron();
  bootstrap.Modal.getOrCreateInstance($('edit-modal')).show();
}

function openEdit(slug) {
  const item = workflows.find(i => i.manifest.slug === slug);
  const shell = item.workflow.nodes.find(n => n.type === 'n8n-nodes-base.executeCommand');
  $('edit-title').textContent = 'Edit ' + item.manifest.name;
  $('edit-slug').value = slug;
  $('edit-name').value = item.manifest.name;
  $('edit-cron').value = item.manifest.cronExpression;
  $('edit-timezone').value = item.manifest.timezone;
  $('edit-shell').value = shell ? shell.parameters.command : '';
  $('template-group').classList.add('d-none');
  $('shell-group').classList.toggle('d-none', !shell);
  checkCron();
  bootstrap.Modal.getOrCreateInstance($('edit-modal')).show();
}

async function saveWorkflow() {
  const slug = $('edit-slug').value;
  const body = { name: $('edit-name').value, cronExpression: $('edit-cron').value, timezone: $('edit-timezone').value, shellCommand: $('edit-shell').value || null };
  try {
    if (slug) {
      const result = await api('PUT', '/api/workflows/' + slug, body);
      toast(result.needsRedeploy ? 'Saved locally - deploy to update n8n' : 'Saved');
    } else {
      body.template = $('edit-template').value;
      const result = await api('POST', '/api/workflows', body);
      toast('Created ' + result.slug);
    }
    bootstrap.Modal.getInstance($('edit-modal')).hide();
    await refresh();
  } catch (e) { toast(e.message, false); }
}

async function deploy(slug) {
  try {
    const result = await api('POST', '/api/workflows/' + slug + '/deploy', { activate: false });
    toast((result.created ? 'Created' : 'Updated') + ' workflow ' + result.workflowId);
    await refresh();
  } catch (e) { toast(e.message, false); }
}

async function toggleActive(slug, active) {
  try {
    await api('POST', '/api/workflows/' + slug + '/activate', { active });
    toast(active ? 'Activated' : 'Deactivated');
    await refresh();
  } catch (e) { toast(e.message, false); }
}

async function archive(slug) {
  if (!confirm('Archive ' + slug + '?')) return;
  try {
    const result = await api('DELETE', '/api/workflows/' + slug);
    toast(result.warnings.length ? result.warnings.join('; ') : 'Archived', !result.warnings.length);
    await refresh();
  } catch (e) { toast(e.message, false); }
}

loadOptions().then(refresh).catch(e => toast(e.message, false));
</script>
</body>
</html>
"""


def render_page() -> str:
    return PAGE_TEMPLATE.replace("__VERSION__", __version__)
