"""
Smoke test harness.

Runs the public client operations against a live account and tallies which
ones pass. A failing check never stops the run.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from .generator import InsightlyClient

logger = logging.getLogger(__name__)

# Suppress httpx INFO logs for cleaner output
logging.getLogger("httpx").setLevel(logging.WARNING)


@dataclass
class SmokeTestResult:
    """Outcome of a smoke test run."""
    passed: int = 0
    failed: int = 0
    failures: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0


class SmokeTest:
    """Collects PASS/FAIL results for a sequence of client calls."""

    def __init__(self, client: InsightlyClient, top: int | None = None):
        self.client = client
        self.top = top
        self.result = SmokeTestResult()

    def check(self, name: str, call: Callable[[], Any]) -> Any:
        """
        Run one call and record the outcome.

        Returns:
            The call's result, or None when it failed
        """
        try:
            value = call()
        except Exception as e:
            logger.warning(f"{name} failed: {e}")
            print(f"FAIL: {name}")
            self.result.failed += 1
            self.result.failures.append(name)
            return None

        if isinstance(value, list):
            print(f"PASS: {name}, found {len(value)} items.")
        else:
            print(f"PASS: {name}")
        self.result.passed += 1
        return value

    def _first_id(self, records: Any, id_field: str) -> Any:
        if records and isinstance(records, list) and isinstance(records[0], dict):
            return records[0].get(id_field)
        return None

    def _create_and_delete(self, resource: str, record: dict[str, Any], id_field: str) -> None:
        created = self.check(f"add {resource}", lambda: self.client.save_record(resource, record))
        if isinstance(created, dict) and created.get(id_field):
            self.check(
                f"delete {resource}",
                lambda: self.client.delete_record(resource, created[id_field]),
            )

    def _related(self, resource: str, singular: str, item_id: Any, subs: tuple[str, ...]) -> None:
        if not item_id:
            return
        for sub in subs:
            self.check(
                f"get_{singular}_{sub}",
                lambda sub=sub: self.client.list_related(resource, item_id, sub),
            )

    def run(self) -> SmokeTestResult:
        client = self.client
        top = self.top

        print("Testing authentication")
        self.check("get_currencies", client.get_currencies)

        users = self.check("get_users", client.get_users)
        user_id = self._first_id(users, "USER_ID")

        contacts = self.check(
            "get_contacts",
            lambda: client.get_contacts(orderby="DATE_UPDATED_UTC desc", top=top),
        )
        contact_id = self._first_id(contacts, "CONTACT_ID")
        self._related("contacts", "contact", contact_id, ("emails", "notes", "tasks"))

        self._create_and_delete(
            "contacts",
            {"SALUTATION": "Mr", "FIRST_NAME": "Testy", "LAST_NAME": "McTesterson"},
            "CONTACT_ID",
        )

        self.check("get_countries", client.get_countries)
        self.check("get_custom_fields", client.get_custom_fields)
        self.check("get_emails", lambda: client.get_emails(top=top))
        self.check("get_events", lambda: client.get_events(top=top))

        self._create_and_delete(
            "events",
            {
                "TITLE": "Test Event",
                "LOCATION": "Somewhere",
                "DETAILS": "Details",
                "START_DATE_UTC": "2014-07-12 12:00:00",
                "END_DATE_UTC": "2014-07-12 13:00:00",
                "OWNER_USER_ID": user_id,
                "ALL_DAY": False,
                "PUBLICLY_VISIBLE": True,
            },
            "EVENT_ID",
        )

        self.check("get_file_categories", client.get_file_categories)
        self._create_and_delete(
            "file_categories",
            {"CATEGORY_NAME": "Test Category", "ACTIVITY": True, "BACKGROUND_COLOR": "000000"},
            "CATEGORY_ID",
        )

        self.check("get_notes", lambda: client.get_notes(top=top))

        opportunities = self.check(
            "get_opportunities",
            lambda: client.get_opportunities(orderby="DATE_UPDATED_UTC desc", top=top),
        )
        self._related(
            "opportunities",
            "opportunity",
            self._first_id(opportunities, "OPPORTUNITY_ID"),
            ("emails", "notes", "tasks", "state_history"),
        )

        self.check("get_opportunity_categories", client.get_opportunity_categories)
        self._create_and_delete(
            "opportunity_categories",
            {"CATEGORY_NAME": "Test Category", "ACTIVE": True, "BACKGROUND_COLOR": "000000"},
            "CATEGORY_ID",
        )
        self.check("get_opportunity_state_reasons", client.get_opportunity_state_reasons)

        organizations = self.check(
            "get_organizations",
            lambda: client.get_organizations(top=top, orderby="DATE_UPDATED_UTC desc"),
        )
        self._related(
            "organizations",
            "organization",
            self._first_id(organizations, "ORGANISATION_ID"),
            ("emails", "notes", "tasks"),
        )
        self._create_and_delete(
            "organizations",
            {"ORGANISATION_NAME": "Foo Corp", "BACKGROUND": "Details"},
            "ORGANISATION_ID",
        )

        self.check("get_pipelines", client.get_pipelines)
        self.check("get_pipeline_stages", client.get_pipeline_stages)

        projects = self.check(
            "get_projects",
            lambda: client.get_projects(top=top, orderby="DATE_UPDATED_UTC desc"),
        )
        project_id = self._first_id(projects, "PROJECT_ID")
        self._related("projects", "project", project_id, ("emails", "notes", "tasks"))

        self.check("get_project_categories", client.get_project_categories)
        self.check("get_relationships", client.get_relationships)
        self.check("get_tasks", lambda: client.get_tasks(top=top, orderby="DUE_DATE desc"))

        teams = self.check("get_teams", client.get_teams)
        team_id = self._first_id(teams, "TEAM_ID")
        if team_id:
            self.check("get_team_members", lambda: client.get_team_members(team_id))

        return self.result


def run_smoke_test(client: InsightlyClient, top: int | None = None) -> SmokeTestResult:
    """
    Run the smoke test suite against a live account.

    Args:
        client: Configured client
        top: Optional page size for list calls

    Returns:
        SmokeTestResult with pass/fail counts
    """
    print("Test API .....")
    print()

    result = SmokeTest(client, top=top).run()

    print()
    print("=" * 50)
    print(f"{result.passed} passed, {result.failed} failed")
    print("=" * 50)
    return result
