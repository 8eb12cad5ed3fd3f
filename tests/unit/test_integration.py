"""Tests for the integration descriptor."""

import pytest

from dynamodb_proxy.errors import ErrorCode, ProxyError
from dynamodb_proxy.events import Action, CorsSpec
from dynamodb_proxy.integration import ACTION_URI, build_integration, build_integration_responses
from dynamodb_proxy.response_templates import GET_ITEM_RESPONSE_TEMPLATE
from dynamodb_proxy.responses import ALLOW_ORIGIN_HEADER


class TestBuildIntegration:
    """Tests for build_integration."""

    def test_fixed_fields(self, make_event):
        """The integration always POSTs to DynamoDB through the proxy role."""
        integration = build_integration(make_event(method="delete", action=Action.DELETE_ITEM))

        assert integration["IntegrationHttpMethod"] == "POST"
        assert integration["Type"] == "AWS"
        assert integration["PassthroughBehavior"] == "NEVER"
        assert integration["Credentials"] == {"Fn::GetAtt": ["ApigatewayToDynamodbRole", "Arn"]}

    @pytest.mark.parametrize("action", list(Action))
    def test_uri_names_the_action(self, make_event, action):
        """The URI targets the DynamoDB action endpoint."""
        integration = build_integration(make_event(action=action))

        assert integration["Uri"] == {"Fn::Sub": [ACTION_URI, {"action": action.value}]}

    def test_request_templates(self, make_event):
        """Request templates are present for both content types."""
        integration = build_integration(make_event())

        assert set(integration["RequestTemplates"]) == {"application/json", "application/x-www-form-urlencoded"}

    def test_no_cors_by_default(self, make_event):
        """Without CORS the response parameters stay empty."""
        integration = build_integration(make_event())

        assert all(r["ResponseParameters"] == {} for r in integration["IntegrationResponses"])

    def test_cors_merged_into_responses(self, make_event):
        """With CORS every integration response maps the origin header."""
        integration = build_integration(make_event(cors=CorsSpec(origin="https://a.example")))

        for response in integration["IntegrationResponses"]:
            assert response["ResponseParameters"] == {ALLOW_ORIGIN_HEADER: "'https://a.example'"}

    def test_unsupported_action(self, make_event):
        """Unsupported actions raise instead of producing an integration."""
        with pytest.raises(ProxyError) as exc_info:
            build_integration(make_event(action="Scan"))

        assert exc_info.value.error_code == ErrorCode.UNSUPPORTED_ACTION


class TestBuildIntegrationResponses:
    """Tests for build_integration_responses."""

    def test_selection_patterns(self, make_event):
        """2xx, 4xx and 5xx selection patterns map to 200, 400 and 500."""
        responses = build_integration_responses(make_event())

        assert [(r["StatusCode"], r["SelectionPattern"]) for r in responses] == [
            (200, "2\\d{2}"),
            (400, "4\\d{2}"),
            (500, "5\\d{2}"),
        ]

    def test_get_item_success_template(self, make_event):
        """GetItem's 2xx response flattens the item; errors pass through."""
        responses = build_integration_responses(make_event())

        assert responses[0]["ResponseTemplates"]["application/json"] == GET_ITEM_RESPONSE_TEMPLATE
        assert responses[1]["ResponseTemplates"] == {}
        assert responses[2]["ResponseTemplates"] == {}

    def test_put_item_has_no_success_template(self, make_event):
        """PutItem responses pass through unchanged."""
        responses = build_integration_responses(make_event(action=Action.PUT_ITEM))

        assert responses[0]["ResponseTemplates"] == {}
