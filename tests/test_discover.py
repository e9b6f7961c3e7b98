"""Tests for workflow discovery and classification."""

import pytest
from conftest import remote_workflow, schedule_node

from cron8n.workflow import (
    Node,
    Workflow,
    analyze_workflow,
    extract_cron_expression,
    extract_timezone,
    filter_cron_workflows,
    get_managed_slug,
    group_workflows,
    is_cron_node,
    is_managed,
    suggest_slug,
)
from cron8n.workflow.discover import CRON_EXTRACTORS


def parse(data: dict) -> Workflow:
    result = Workflow.parse(data)
    assert result.success, result.error
    return result.value


def managed_tags(slug: str) -> list[dict]:
    return [{"id": "t1", "name": "managed-by:cron8n"}, {"id": "t2", "name": f"cron8n:{slug}"}]


class TestIsCronNode:
    """Tests for is_cron_node."""

    @pytest.mark.parametrize(
        "node_type",
        [
            "n8n-nodes-base.scheduleTrigger",
            "n8n-nodes-base.cron",
            "n8n-nodes-base.schedule",
            "N8N-NODES-BASE.SCHEDULETRIGGER",
            "@custom/n8n-nodes-base.cronPlus",
        ],
    )
    def test_matches(self, node_type):
        """Test known types match case-insensitively, including as a substring."""
        assert is_cron_node(Node(name="t", type=node_type))

    @pytest.mark.parametrize("node_type", ["n8n-nodes-base.httpRequest", "n8n-nodes-base.webhook", ""])
    def test_non_matches(self, node_type):
        assert not is_cron_node(Node(name="t", type=node_type))

    def test_prefix_of_known_type_matches(self):
        """Test matching also works with the node type inside a known type."""
        assert is_cron_node(Node(name="t", type="n8n-nodes-base.sched"))


class TestExtractCronExpression:
    """Tests for the three parameter layouts."""

    def test_rule_interval(self):
        node = Node(name="t", type="x", parameters=schedule_node("*/5 * * * *")["parameters"])
        assert extract_cron_expression(node) == "*/5 * * * *"

    def test_rule_interval_requires_cron_field(self):
        """Test interval entries for other fields are not cron expressions."""
        parameters = {"rule": {"interval": [{"field": "hours", "hoursInterval": 2}]}}
        assert extract_cron_expression(Node(name="t", type="x", parameters=parameters)) is None

    def test_flat_field(self):
        node = Node(name="t", type="x", parameters={"cronExpression": "0 1 * * *"})
        assert extract_cron_expression(node) == "0 1 * * *"

    def test_trigger_times(self):
        parameters = {"triggerTimes": {"item": [{"mode": "custom", "cronExpression": "0 2 * * *"}]}}
        assert extract_cron_expression(Node(name="t", type="x", parameters=parameters)) == "0 2 * * *"

    def test_priority_order(self):
        """Test rule.interval wins over the flat field, which wins over triggerTimes."""
        parameters = {
            "rule": {"interval": [{"field": "cronExpression", "expression": "1 * * * *"}]},
            "cronExpression": "2 * * * *",
            "triggerTimes": {"item": [{"cronExpression": "3 * * * *"}]},
        }
        assert extract_cron_expression(Node(name="t", type="x", parameters=parameters)) == "1 * * * *"
        del parameters["rule"]
        assert extract_cron_expression(Node(name="t", type="x", parameters=parameters)) == "2 * * * *"
        del parameters["cronExpression"]
        assert extract_cron_expression(Node(name="t", type="x", parameters=parameters)) == "3 * * * *"

    def test_extractors_are_independent(self):
        """Test each extractor only understands its own layout."""
        flat = {"cronExpression": "0 1 * * *"}
        assert [extractor(flat) for extractor in CRON_EXTRACTORS] == [None, "0 1 * * *", None]

    def test_no_expression(self):
        assert extract_cron_expression(Node(name="t", type="x", parameters={})) is None


class TestExtractTimezone:
    """Tests for extract_timezone."""

    def test_options_timezone(self):
        node = Node(name="t", type="x", parameters={"options": {"timezone": "UTC"}, "timezone": "Asia/Tokyo"})
        assert extract_timezone(node) == "UTC"

    def test_flat_timezone(self):
        assert extract_timezone(Node(name="t", type="x", parameters={"timezone": "Asia/Tokyo"})) == "Asia/Tokyo"

    def test_missing(self):
        assert extract_timezone(Node(name="t", type="x")) is None


class TestAnalyzeWorkflow:
    """Tests for analyze_workflow and grouping."""

    def test_managed_workflow(self):
        """Test a tagged workflow with one schedule trigger."""
        workflow = parse(remote_workflow(id="7", tags=managed_tags("my-workflow")))

        info = analyze_workflow(workflow)

        assert info.is_managed is True
        assert info.managed_slug == "my-workflow"
        assert len(info.cron_nodes) == 1
        assert info.cron_nodes[0].cron_expression == "0 9 * * 1-5"
        assert info.cron_nodes[0].timezone == "Europe/London"

    def test_unmanaged_workflow(self):
        info = analyze_workflow(parse(remote_workflow(id="8")))

        assert info.is_managed is False
        assert info.managed_slug is None

    def test_slug_tag_without_managed_tag(self):
        """Test the slug is only reported for managed workflows."""
        workflow = parse(remote_workflow(id="9", tags=[{"id": "t2", "name": "cron8n:orphan"}]))

        assert not is_managed(workflow)
        assert get_managed_slug(workflow) == "orphan"
        assert analyze_workflow(workflow).managed_slug is None

    def test_to_dict(self):
        data = analyze_workflow(parse(remote_workflow(id="7", tags=managed_tags("x")))).to_dict()

        assert data["workflowId"] == "7"
        assert data["isManaged"] is True
        assert data["cronNodes"][0]["nodeType"] == "n8n-nodes-base.scheduleTrigger"

    def test_filter_and_group(self):
        workflows = [
            parse(remote_workflow(id="1", tags=managed_tags("a"))),
            parse(remote_workflow(id="2")),
            parse(remote_workflow(id="3", nodes=[{"name": "Hook", "type": "n8n-nodes-base.webhook"}])),
        ]

        assert [w.id for w in filter_cron_workflows(workflows)] == ["1", "2"]
        groups = group_workflows(workflows)
        assert [i.workflow_id for i in groups.managed] == ["1"]
        assert [i.workflow_id for i in groups.unmanaged] == ["2"]

    def test_suggest_slug(self):
        assert suggest_slug("Daily Sales Report (EU)") == "daily-sales-report-eu"


class TestWorkflowModel:
    """Tests for parsing workflow documents."""

    def test_unknown_node_keys_survive(self):
        """Test node keys cron8n does not model round-trip."""
        workflow = parse(remote_workflow(id="1"))

        assert workflow.nodes[1].extra == {"notes": "kept on round-trip"}
        assert workflow.to_dict()["nodes"][1]["notes"] == "kept on round-trip"

    def test_numeric_ids_become_strings(self):
        workflow = parse(remote_workflow(id=12, tags=[{"id": 3, "name": "x"}]))

        assert workflow.id == "12"
        assert workflow.tags[0].id == "3"

    def test_null_settings(self):
        assert parse(remote_workflow(settings=None)).settings == {}

    def test_invalid_document(self):
        result = Workflow.parse({"name": 5, "nodes": [{"type": "x"}]})

        assert not result.success
        assert "'name' must be a string" in result.error
        assert "nodes[0]" in result.error
