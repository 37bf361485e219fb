"""HTTP client for the Study Plan Tracker API.

The client keeps the last fetched plans and pending invitations as a cache.
The server stays authoritative: every mutation is followed by a refetch
instead of patching the cache locally.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from client.session import AuthSession

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised for any non-2xx response."""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


class StudyPlanClient:
    """Talks to the API on behalf of one AuthSession.

    Args:
        http: An ``httpx.Client`` whose base URL points at the server root.
        session: The session holding the bearer token.
    """

    def __init__(self, http: httpx.Client, session: AuthSession):
        self.http = http
        self.session = session
        self.plans: List[Dict[str, Any]] = []
        self.pending_invitations: List[Dict[str, Any]] = []

    def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        response = self.http.request(
            method, path, json=json, headers=self.session.auth_headers()
        )
        if response.is_error:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text
            logger.debug("%s %s failed: %s", method, path, detail)
            raise ApiError(response.status_code, detail)
        return response.json()

    # --- Session lifecycle ---

    def register(self, name: str, email: str, password: str, college: str = "") -> dict:
        data = self._request(
            "POST",
            "/api/auth/register",
            {"name": name, "email": email, "password": password, "college": college},
        )
        self.session.load(data["token"], data["user"])
        self.refresh()
        return data["user"]

    def login(self, email: str, password: str) -> dict:
        data = self._request(
            "POST", "/api/auth/login", {"email": email, "password": password}
        )
        self.session.load(data["token"], data["user"])
        self.refresh()
        return data["user"]

    def restore(self, token: str) -> bool:
        """Re-validate a stored token; clears the session if it is rejected."""
        self.session.load(token, None)
        try:
            user = self._request("GET", "/api/auth/me")
        except ApiError:
            self.logout()
            return False
        self.session.load(token, user)
        self.refresh()
        return True

    def logout(self) -> None:
        self.session.clear()
        self.plans = []
        self.pending_invitations = []

    # --- Reads ---

    def refresh(self) -> None:
        """Refetch the cached plan list and pending invitations."""
        self.plans = self._request("GET", "/api/plans")
        self.pending_invitations = self._request("GET", "/api/plans/invitations")

    def get_plan(self, plan_id: str) -> dict:
        return self._request("GET", f"/api/plans/{plan_id}")

    def list_members(self, plan_id: str) -> List[dict]:
        return self._request("GET", f"/api/plans/{plan_id}/members")

    # --- Mutations ---

    def _mutate(self, method: str, path: str, json: Optional[dict] = None) -> dict:
        plan = self._request(method, path, json)
        self.refresh()
        return plan

    def create_plan(
        self, title: str, start_date: str, end_date: str, description: str = ""
    ) -> dict:
        return self._mutate(
            "POST",
            "/api/plans",
            {
                "title": title,
                "description": description,
                "startDate": start_date,
                "endDate": end_date,
            },
        )

    def invite(self, plan_id: str, email: str) -> dict:
        return self._mutate("POST", f"/api/plans/{plan_id}/invite", {"email": email})

    def respond_to_invitation(self, plan_id: str, invitation_id: str, status: str) -> dict:
        return self._mutate(
            "POST",
            f"/api/plans/{plan_id}/invitations/{invitation_id}",
            {"status": status},
        )

    def create_task(self, plan_id: str, title: str, due_date: str, **fields) -> dict:
        body = {"title": title, "dueDate": due_date}
        body.update(fields)
        return self._mutate("POST", f"/api/plans/{plan_id}/tasks", body)

    def update_task(self, plan_id: str, task_id: str, **fields) -> dict:
        return self._mutate("PATCH", f"/api/plans/{plan_id}/tasks/{task_id}", fields)

    def assign_task(self, plan_id: str, task_id: str, user_id: str) -> dict:
        return self._mutate(
            "POST",
            f"/api/plans/{plan_id}/tasks/{task_id}/assign",
            {"userId": user_id},
        )
