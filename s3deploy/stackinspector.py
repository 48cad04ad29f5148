"""
Read-only CloudFormation stack inspection
"""
from s3deploy import static
from s3deploy import events
from s3deploy import exception
from s3deploy.logger import log

# error text markers checked in order, first match wins
RECOMMENDATIONS = [
    (('AccessDenied', 'UnauthorizedOperation'), [
        'Check that your AWS credentials have '
        'cloudformation:DescribeStacks permission',
        'Verify the correct AWS profile is being used',
        'Ensure the stack exists in the correct AWS account',
    ]),
    (('ValidationError',), [
        'Verify the stack name is correct and exists',
        'Check that you are querying the correct AWS region',
        'Ensure the stack is not in a DELETE_COMPLETE state',
    ]),
    (('does not exist',), [
        'Create the stack first using CDK or CloudFormation',
        'Verify you are connected to the correct AWS account',
        'Check the correct region is specified',
    ]),
]
DEFAULT_RECOMMENDATIONS = [
    'Check your internet connection',
    'Verify AWS credentials are configured',
    'Try again with a different AWS profile or region',
]
STACK_NOT_FOUND_RECOMMENDATIONS = [
    'Verify the stack name is correct',
    'Check that the stack exists in the specified region',
    'Ensure your AWS credentials have permission to describe the stack',
]


def get_recommendations(error):
    """
    Returns remediation hints for a stack inspection error
    """
    if not error:
        return []
    if isinstance(error, exception.RemoteCallFailed) and error.error_code:
        text = '%s %s' % (error.error_code, error)
    else:
        text = str(error)
    for markers, recommendations in RECOMMENDATIONS:
        if any(marker in text for marker in markers):
            return list(recommendations)
    return list(DEFAULT_RECOMMENDATIONS)


class StackSnapshot(object):
    def __init__(self, stack_name, region, status, outputs=None,
                 ready_for_deployment=None):
        self.stack_name = stack_name
        self.region = region
        self.status = status
        self.outputs = dict(outputs or {})
        if ready_for_deployment is None:
            ready_for_deployment = status in static.READY_STACK_STATUSES
        self.ready_for_deployment = ready_for_deployment

    def __repr__(self):
        return '<StackSnapshot: %s %s>' % (self.stack_name, self.status)

    @classmethod
    def from_stack(cls, stack, region):
        outputs = {}
        for output in stack.get('Outputs') or []:
            key = output.get('OutputKey')
            value = output.get('OutputValue')
            if key and value:
                outputs[key] = value
        return cls(stack['StackName'], region, stack.get('StackStatus'),
                   outputs)

    def find_output(self, candidates):
        for name in candidates:
            if self.outputs.get(name):
                return self.outputs[name]


class StackInspectionResult(object):
    def __init__(self, success, snapshot=None, error=None,
                 recommendations=None):
        self.success = success
        self.snapshot = snapshot
        self.error = error
        self.recommendations = recommendations or []

    def __repr__(self):
        if self.success:
            return '<StackInspectionResult: %r>' % self.snapshot
        return '<StackInspectionResult: failed (%s)>' % self.error


class StackInspector(object):
    """
    Looks up a deployed stack's status and outputs.

    cfn_factory(profile, region) must return an EasyCFN-like object.
    """
    def __init__(self, cfn_factory, publisher=None):
        self.cfn_factory = cfn_factory
        self.events = publisher or events.EventPublisher()

    def inspect_stack(self, stack_name, profile=None, region=None):
        region = region or static.DEFAULT_REGION
        log.info("Inspecting stack: %s (%s)" % (stack_name, region))
        self.events.publish(events.BEFORE_STACK_INSPECTION,
                            stack_name=stack_name, region=region,
                            profile=profile)
        try:
            cfn = self.cfn_factory(profile, region)
            stack = cfn.describe_stack(stack_name)
        except exception.AWSError as e:
            self.events.publish(events.STACK_INSPECTION_FAILED,
                                stack_name=stack_name, error=str(e))
            return StackInspectionResult(False, error=str(e),
                                         recommendations=get_recommendations(
                                             e))
        if stack is None:
            error = "Stack '%s' not found or not accessible" % stack_name
            self.events.publish(events.STACK_INSPECTION_FAILED,
                                stack_name=stack_name, error=error)
            return StackInspectionResult(
                False, error=error,
                recommendations=list(STACK_NOT_FOUND_RECOMMENDATIONS))
        snapshot = StackSnapshot.from_stack(stack, region)
        log.debug("stack %s outputs: %s" % (stack_name, snapshot.outputs))
        self.events.publish(events.AFTER_STACK_INSPECTION,
                            stack_name=stack_name, snapshot=snapshot,
                            outputs_count=len(snapshot.outputs),
                            ready_for_deployment=snapshot.ready_for_deployment)
        return StackInspectionResult(True, snapshot=snapshot)
