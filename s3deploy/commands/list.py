from s3deploy.commands.base import CmdBase


class CmdList(CmdBase):
    """
    list

    List all static sites defined in the config
    """
    names = ['list', 'ls']

    def execute(self, args):
        sites = self.cfg.get_sites()
        if not sites:
            self.log.info("No sites found.")
        header = '*' * 60
        for site in sites:
            print(header)
            print(site.name)
            print(header)
            print('Dist directory: %s' % site.dist_path)
            if site.stack_name:
                print('Stack: %s' % site.stack_name)
            print('Bucket: %s' % (site.bucket_name or 'N/A'))
            print('Distribution: %s' % (site.distribution_id or 'N/A'))
            print()
