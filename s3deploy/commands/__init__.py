from s3deploy.commands.deploy import CmdDeploy
from s3deploy.commands.sync import CmdSync
from s3deploy.commands.invalidate import CmdInvalidate
from s3deploy.commands.inspect import CmdInspect
from s3deploy.commands.list import CmdList
from s3deploy.commands.help import CmdHelp

all_cmds = [
    CmdDeploy(),
    CmdSync(),
    CmdInvalidate(),
    CmdInspect(),
    CmdList(),
    CmdHelp(),
]
