"""Logical page names -> static HTML files under the public directory."""

from __future__ import annotations

PAGES: dict[str, str] = {
    "login": "login.html",
    "booking_success": "asucces.html",
    "member_dashboard": "user_dashboard.html",
    "trainer_dashboard": "trainer_dashboard.html",
    "admin_dashboard": "admin_dashboard.html",
}

DASHBOARD_BY_ROLE: dict[str, str] = {
    "member": "member_dashboard",
    "trainer": "trainer_dashboard",
    "admin": "admin_dashboard",
}


def page_url(name: str) -> str:
    return "/" + PAGES[name]


def dashboard_url(role: str) -> str:
    return page_url(DASHBOARD_BY_ROLE.get(role, "member_dashboard"))


__all__ = ["PAGES", "DASHBOARD_BY_ROLE", "page_url", "dashboard_url"]
