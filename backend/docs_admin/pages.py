"""Server-rendered admin pages: the login form and the dashboard shell."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from .auth_gate import ADMIN_API_LOGIN_PATH, ADMIN_API_LOGOUT_PATH, ADMIN_LOGIN_PATH, ADMIN_UI_PREFIX

router = APIRouter(tags=["pages"])

_LOGIN_PAGE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Admin login</title>
</head>
<body>
  <main style="max-width: 24rem; margin: 2.5rem auto; font-family: sans-serif">
    <h1>Admin login</h1>
    <p>Enter the admin password to open the back-office.</p>
    <form id="login-form">
      <label for="password">Password</label>
      <input id="password" name="password" type="password" autocomplete="current-password" required>
      <div id="login-error" role="alert"></div>
      <button type="submit">Sign in</button>
    </form>
  </main>
  <script>
    const nextParam = new URLSearchParams(window.location.search).get("next");
    const nextPath = nextParam && nextParam.startsWith("__UI_PREFIX__") ? nextParam : "__UI_PREFIX__";
    const form = document.getElementById("login-form");
    const errorBox = document.getElementById("login-error");

    form.addEventListener("submit", async (event) => {
      event.preventDefault();
      errorBox.textContent = "";
      const button = form.querySelector("button");
      button.disabled = true;
      try {
        const res = await fetch("__LOGIN_API__", {
          method: "POST",
          headers: { "Content-Type": "application/json" },
          body: JSON.stringify({ password: form.password.value }),
        });
        if (res.status === 429) {
          const seconds = parseInt(res.headers.get("Retry-After") || "60", 10);
          errorBox.textContent = "Too many attempts. Try again in " + Math.ceil(seconds / 60) + " minutes.";
          return;
        }
        if (!res.ok) {
          errorBox.textContent = "Incorrect password";
          return;
        }
        window.location.replace(nextPath);
      } catch (err) {
        errorBox.textContent = "Login failed, please try again later";
      } finally {
        button.disabled = false;
      }
    });
  </script>
</body>
</html>
"""

_DASHBOARD_PAGE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Admin - MDX Editor</title>
</head>
<body>
  <header style="display: flex; justify-content: space-between; font-family: sans-serif">
    <a href="__UI_PREFIX__">MDX Editor</a>
    <form method="post" action="__LOGOUT_API__">
      <button type="submit">Log out</button>
    </form>
  </header>
</body>
</html>
"""


def _render(template: str) -> str:
    return (
        template.replace("__UI_PREFIX__", ADMIN_UI_PREFIX)
        .replace("__LOGIN_API__", ADMIN_API_LOGIN_PATH)
        .replace("__LOGOUT_API__", ADMIN_API_LOGOUT_PATH)
    )


@router.get(ADMIN_LOGIN_PATH, response_class=HTMLResponse)
async def login_page():
    return HTMLResponse(_render(_LOGIN_PAGE), headers={"Cache-Control": "no-store"})


@router.get(ADMIN_UI_PREFIX, response_class=HTMLResponse)
async def dashboard_page():
    # AdminAuthMiddleware has already rejected requests without a session
    return HTMLResponse(_render(_DASHBOARD_PAGE), headers={"Cache-Control": "no-store"})
