from s3deploy import static
from s3deploy import exception
from s3deploy.stackinspector import StackInspector

from s3deploy.commands.base import CmdBase


class CmdInspect(CmdBase):
    """
    inspect <stack_name>

    Show a CloudFormation stack's status and the deployment target it
    resolves to
    """
    names = ['inspect', 'i']

    def execute(self, args):
        if len(args) != 1:
            self.parser.error("please specify a <stack_name>")
        stack_name = args[0]
        inspector = StackInspector(self.cfg.get_easy_cfn,
                                   publisher=self.publisher)
        result = inspector.inspect_stack(
            stack_name, profile=self.profile or self.cfg.aws.aws_profile,
            region=self.region or self.cfg.aws.aws_region_name)
        if not result.success:
            raise exception.StackInspectionFailed(stack_name, result.error,
                                                  result.recommendations)
        snapshot = result.snapshot
        header = '*' * 60
        print(header)
        print(snapshot.stack_name)
        print(header)
        print('Region: %s' % snapshot.region)
        print('Status: %s' % snapshot.status)
        print('Ready for deployment: %s' % snapshot.ready_for_deployment)
        print('Bucket: %s' % (snapshot.find_output(static.BUCKET_OUTPUT_KEYS)
                              or 'N/A'))
        print('Distribution: %s' %
              (snapshot.find_output(static.DISTRIBUTION_OUTPUT_KEYS) or
               'N/A'))
        if snapshot.outputs:
            print('Outputs:')
            for key in sorted(snapshot.outputs):
                print('   - %s: %s' % (key, snapshot.outputs[key]))
        print()
