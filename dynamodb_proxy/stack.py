"""
CDK stack for DynamoDB service proxies.

Synthesizes the compiled CloudFormation resources as-is, keeping the logical IDs
the compiler generated so method, role and resource references line up.
"""

from typing import Any, Dict, List, Optional

from aws_cdk import CfnOutput, CfnResource, Fn, Stack
from constructs import Construct

from .events import EventSpec
from .iam_roles import compile_iam_role
from .logging import StructuredLogger
from .method_compiler import CompileResult, MethodCompiler
from .naming import REST_API_LOGICAL_ID, ApiContext

DEPLOYMENT_LOGICAL_ID = "ApiGatewayDeployment"


def compile_rest_api(api_name: str) -> Dict[str, Dict[str, Any]]:
    return {
        REST_API_LOGICAL_ID: {
            "Type": "AWS::ApiGateway::RestApi",
            "Properties": {
                "Name": api_name,
                "EndpointConfiguration": {"Types": ["EDGE"]},
            },
        }
    }


def compile_deployment(api: ApiContext, stage_name: str, method_logical_ids: List[str]) -> Dict[str, Dict[str, Any]]:
    """Deployment of the stage; it must wait for every method to exist."""
    if not method_logical_ids:
        return {}
    return {
        DEPLOYMENT_LOGICAL_ID: {
            "Type": "AWS::ApiGateway::Deployment",
            "Properties": {
                "RestApiId": api.rest_api_id,
                "StageName": stage_name,
            },
            "DependsOn": list(method_logical_ids),
        }
    }


class ServiceProxyStack(Stack):
    """
    API Gateway REST API proxying straight to DynamoDB.

    Creates:
    - REST API (unless an existing one is passed in)
    - API resources for every event path
    - IAM role API Gateway assumes to call DynamoDB
    - One method per event, with its mapping templates
    - Deployment for the stage
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        events: List[EventSpec],
        api_name: str,
        stage_name: str = "dev",
        existing_rest_api: Optional[dict] = None,
        fail_fast: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.logger = StructuredLogger(__name__)

        if existing_rest_api:
            self.api = ApiContext.imported(existing_rest_api["rest_api_id"], existing_rest_api["root_resource_id"])
            resources: Dict[str, Dict[str, Any]] = {}
        else:
            self.api = ApiContext()
            resources = compile_rest_api(api_name)

        self.compile_result: CompileResult = MethodCompiler(self.api, fail_fast, self.logger).compile(
            events, resources
        )

        resources = dict(self.compile_result.resources)
        resources.update(compile_iam_role(self.compile_result.compiled_events))
        resources.update(compile_deployment(self.api, stage_name, list(self.compile_result.method_logical_ids)))

        self.cfn_resources: Dict[str, CfnResource] = {
            logical_id: self._add_resource(logical_id, resource) for logical_id, resource in resources.items()
        }

        rest_api_id = self.api.rest_api_id if self.api.is_imported else Fn.ref(REST_API_LOGICAL_ID)
        CfnOutput(
            self,
            "ServiceEndpoint",
            value=Fn.sub(
                "https://${RestApiId}.execute-api.${AWS::Region}.${AWS::URLSuffix}/" + stage_name,
                {"RestApiId": rest_api_id},
            ),
            description="URL of the service proxy stage",
        )

    def _add_resource(self, logical_id: str, resource: Dict[str, Any]) -> CfnResource:
        cfn_resource = CfnResource(
            self,
            logical_id,
            type=resource["Type"],
            properties=resource.get("Properties"),
        )
        cfn_resource.override_logical_id(logical_id)
        if "DependsOn" in resource:
            cfn_resource.add_override("DependsOn", resource["DependsOn"])
        return cfn_resource
