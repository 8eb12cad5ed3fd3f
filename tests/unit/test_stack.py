"""Tests for the service proxy CDK stack."""

import pytest
from aws_cdk import App, assertions

from dynamodb_proxy.errors import ErrorCode
from dynamodb_proxy.events import Action, CorsSpec
from dynamodb_proxy.naming import ApiContext
from dynamodb_proxy.response_templates import GET_ITEM_RESPONSE_TEMPLATE
from dynamodb_proxy.stack import DEPLOYMENT_LOGICAL_ID, ServiceProxyStack, compile_deployment


@pytest.fixture
def events(make_event):
    """GET and DELETE on /users/{id}, PUT on /users."""
    return [
        make_event(cors=CorsSpec()),
        make_event(method="delete", action=Action.DELETE_ITEM),
        make_event(method="put", path="users", action=Action.PUT_ITEM, hash_key=None),
    ]


def _template(events, **kwargs):
    app = App()
    stack = ServiceProxyStack(app, "TestStack", events=events, api_name="users-api-ue1-test", **kwargs)
    return stack, assertions.Template.from_stack(stack)


class TestServiceProxyStack:
    """Tests for ServiceProxyStack."""

    def test_creates_rest_api(self, events):
        """The stack creates its own REST API by default."""
        _, template = _template(events)

        template.has_resource_properties("AWS::ApiGateway::RestApi", {"Name": "users-api-ue1-test"})

    def test_creates_methods_with_compiled_logical_ids(self, events):
        """Each event is a method under its compiled logical ID."""
        _, template = _template(events)

        template.resource_count_is("AWS::ApiGateway::Method", 3)
        resources = template.to_json()["Resources"]
        assert "ApiGatewayMethodUsersIdVarGet" in resources
        assert "ApiGatewayMethodUsersIdVarDelete" in resources
        assert "ApiGatewayMethodUsersPut" in resources

    def test_get_method_has_response_template(self, events):
        """GetItem's integration carries the flattening response template."""
        _, template = _template(events)

        template.has_resource_properties(
            "AWS::ApiGateway::Method",
            {
                "HttpMethod": "GET",
                "Integration": {
                    "IntegrationHttpMethod": "POST",
                    "IntegrationResponses": assertions.Match.array_with(
                        [
                            assertions.Match.object_like(
                                {"ResponseTemplates": {"application/json": GET_ITEM_RESPONSE_TEMPLATE}}
                            )
                        ]
                    ),
                },
            },
        )

    def test_creates_resources_and_role(self, events):
        """Path resources and the DynamoDB role are created."""
        _, template = _template(events)

        template.resource_count_is("AWS::ApiGateway::Resource", 2)
        resources = template.to_json()["Resources"]
        assert resources["ApigatewayToDynamodbRole"]["Type"] == "AWS::IAM::Role"

    def test_deployment_depends_on_methods(self, events):
        """The deployment waits for every method."""
        stack, template = _template(events, stage_name="v1")

        deployment = template.to_json()["Resources"][DEPLOYMENT_LOGICAL_ID]
        assert deployment["Properties"]["StageName"] == "v1"
        assert deployment["DependsOn"] == list(stack.compile_result.method_logical_ids)

    def test_outputs_service_endpoint(self, events):
        """The stage URL is exported."""
        _, template = _template(events)

        assert "ServiceEndpoint" in template.find_outputs("*")

    def test_existing_rest_api(self, events):
        """With an existing API no REST API is created and its IDs are used."""
        _, template = _template(events, existing_rest_api={"rest_api_id": "abc123", "root_resource_id": "root456"})

        template.resource_count_is("AWS::ApiGateway::RestApi", 0)
        template.has_resource_properties("AWS::ApiGateway::Method", {"RestApiId": "abc123"})
        template.has_resource_properties("AWS::ApiGateway::Resource", {"ParentId": "root456", "PathPart": "users"})

    def test_failed_events_are_reported(self, make_event):
        """Events that fail to compile are left out and reported."""
        stack, template = _template([make_event(), make_event(method="post", action="Scan")])

        template.resource_count_is("AWS::ApiGateway::Method", 1)
        assert stack.compile_result.errors[0]["index"] == 1

    def test_role_grants_only_compiled_methods(self, make_event):
        """Skipped events grant nothing on the DynamoDB role."""
        events = [make_event(), make_event(action=Action.DELETE_ITEM, table_name="Orders")]

        stack, template = _template(events)

        assert stack.compile_result.errors[0]["errorCode"] == ErrorCode.LOGICAL_ID_COLLISION
        role = template.to_json()["Resources"]["ApigatewayToDynamodbRole"]
        statement = role["Properties"]["Policies"][0]["PolicyDocument"]["Statement"][0]
        assert statement["Action"] == ["dynamodb:GetItem"]
        assert len(statement["Resource"]) == 1

    def test_paths_sharing_a_resource_id_are_not_merged(self, make_event):
        """A path whose resource ID is already taken is reported instead of served elsewhere."""
        stack, template = _template([make_event(path="a_b"), make_event(path="ab", method="post")])

        template.resource_count_is("AWS::ApiGateway::Resource", 1)
        template.resource_count_is("AWS::ApiGateway::Method", 1)
        template.has_resource_properties("AWS::ApiGateway::Resource", {"PathPart": "a_b"})
        assert stack.compile_result.errors[0]["logicalId"] == "ApiGatewayResourceAb"


class TestCompileDeployment:
    """Tests for compile_deployment."""

    def test_no_methods_no_deployment(self):
        """Without methods there is nothing to deploy."""
        assert compile_deployment(ApiContext(), "dev", []) == {}
