import optparse

from s3deploy.commands.base import CmdBase


class CmdHelp(CmdBase):
    """
    help [<command>]

    Show s3deploy usage
    """
    names = ['help']

    def execute(self, args):
        if args:
            cmdname = args[0]
            if cmdname not in self.subcmds_map:
                self.gparser.error("no such command: %s" % cmdname)
            sc = self.subcmds_map[cmdname]
            parser = optparse.OptionParser(sc.__doc__.strip())
            sc.addopts(parser)
            parser.print_help()
            return
        self.gparser.print_help()
        print()
        print("Available Commands:")
        seen = set()
        for name in sorted(self.subcmds_map):
            sc = self.subcmds_map[name]
            if sc in seen:
                continue
            seen.add(sc)
            doc = (sc.__doc__ or '').strip().splitlines()
            summary = doc[-1].strip() if doc else ''
            print("  %-12s %s" % (', '.join(sc.names), summary))
