import json
import boto3
import os
import logging

logger = logging.getLogger()
logger.setLevel(logging.INFO)

codedeploy = boto3.client('codedeploy')
lambda_client = boto3.client('lambda')

# Honeypot submission: passes every gate check but is dropped before any email is sent
HONEYPOT_SUBMISSION = {
    'email': 'pre-deployment-test@example.com',
    'first_name': 'Pre',
    'last_name': 'Deployment',
    'organisation': 'Smoke Test',
    'website': 'https://pre-deployment-test.invalid'
}


def _invoke(target_function, test_event):
    response = lambda_client.invoke(
        FunctionName=target_function,
        InvocationType='RequestResponse',
        Payload=json.dumps(test_event)
    )

    response_payload = json.loads(response['Payload'].read())
    logger.info(f"Test response: {json.dumps(response_payload)}")

    if response.get('FunctionError'):
        raise Exception(f"Function returned error: {response_payload}")

    if response.get('StatusCode') != 200:
        raise Exception(f"Unexpected status code: {response.get('StatusCode')}")

    return response_payload


def run_smoke_tests(target_function):
    """Invoke the new version with requests that never reach the mail transport."""
    # Test 1: non-POST must be refused before the body is read
    payload = _invoke(target_function, {'httpMethod': 'GET', 'body': None})
    if payload.get('statusCode') != 405:
        raise Exception(f"GET expected 405, got: {payload.get('statusCode')}")

    # Test 2: honeypot must report success without dispatching
    payload = _invoke(target_function, {
        'httpMethod': 'POST',
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(HONEYPOT_SUBMISSION)
    })
    if payload.get('statusCode') != 200 or payload.get('body') != 'Success':
        raise Exception(
            f"Honeypot POST expected 200 'Success', got: "
            f"{payload.get('statusCode')} {payload.get('body')!r}"
        )


def lambda_handler(event, context):
    """
    Pre-traffic hook for CodeDeploy.
    Runs validation tests before shifting traffic to new version.
    """
    logger.info(f"Pre-traffic hook triggered: {json.dumps(event)}")

    deployment_id = event['DeploymentId']
    lifecycle_event_hook_execution_id = event['LifecycleEventHookExecutionId']

    try:
        target_function = os.environ.get('TARGET_FUNCTION')
        if not target_function:
            raise Exception("TARGET_FUNCTION environment variable is not set")

        logger.info(f"Running smoke tests on {target_function}")
        run_smoke_tests(target_function)

        logger.info("Pre-traffic validation passed")

        # Report success
        codedeploy.put_lifecycle_event_hook_execution_status(
            deploymentId=deployment_id,
            lifecycleEventHookExecutionId=lifecycle_event_hook_execution_id,
            status='Succeeded'
        )

        return {
            'statusCode': 200,
            'body': json.dumps('Pre-traffic validation succeeded')
        }

    except Exception as e:
        logger.error(f"Pre-traffic validation failed: {str(e)}", exc_info=True)

        # Report failure - this will prevent deployment
        codedeploy.put_lifecycle_event_hook_execution_status(
            deploymentId=deployment_id,
            lifecycleEventHookExecutionId=lifecycle_event_hook_execution_id,
            status='Failed'
        )

        return {
            'statusCode': 500,
            'body': json.dumps(f'Pre-traffic validation failed: {str(e)}')
        }
