"""
IAM role that API Gateway assumes to call DynamoDB.

Creates:
- ApigatewayToDynamodbRole, limited to the actions and tables the events use
"""

from typing import Any, Dict, Iterable, List

from .events import Action, EventSpec
from .integration import ROLE_LOGICAL_ID

TABLE_ARN = "arn:${AWS::Partition}:dynamodb:${AWS::Region}:${AWS::AccountId}:table/${tableName}"


def table_arn(table_name: Any) -> Dict[str, Any]:
    """ARN of a table given by name or by intrinsic (e.g. `{"Ref": "UsersTable"}`)."""
    return {"Fn::Sub": [TABLE_ARN, {"tableName": table_name}]}


def compile_iam_role(events: Iterable[EventSpec]) -> Dict[str, Dict[str, Any]]:
    """Return `{ROLE_LOGICAL_ID: role}`, or an empty dict when there is nothing to grant."""
    actions: List[str] = []
    resources: List[Dict[str, Any]] = []

    for event in events:
        if not isinstance(event.action, Action):
            continue
        action = f"dynamodb:{event.action.value}"
        if action not in actions:
            actions.append(action)
        arn = table_arn(event.table_name)
        if arn not in resources:
            resources.append(arn)

    if not actions:
        return {}

    return {
        ROLE_LOGICAL_ID: {
            "Type": "AWS::IAM::Role",
            "Properties": {
                "AssumeRolePolicyDocument": {
                    "Version": "2012-10-17",
                    "Statement": [
                        {
                            "Effect": "Allow",
                            "Principal": {"Service": "apigateway.amazonaws.com"},
                            "Action": "sts:AssumeRole",
                        }
                    ],
                },
                "Policies": [
                    {
                        "PolicyName": "apigatewaytodynamodb",
                        "PolicyDocument": {
                            "Version": "2012-10-17",
                            "Statement": [
                                {
                                    "Effect": "Allow",
                                    "Action": sorted(actions),
                                    "Resource": resources,
                                }
                            ],
                        },
                    }
                ],
            },
        }
    }
