config_template = """\
#################################
## s3deploy Configuration File ##
#################################
[global]
# upload strategy for every site: direct or versioned
#DEPLOYMENT_STRATEGY = direct
# resolve bucket/distribution from CloudFormation stack outputs for sites
# that define a STACK_NAME
#ENABLE_REMOTE_DEPLOYMENT = True
# number of files uploaded in parallel (1 = sequential)
#MAX_WORKERS = 4
# split the config into multiple files
#INCLUDE = ~/.s3deploy/aws, ~/.s3deploy/sites

#############################################
## AWS Credentials and Connection Settings ##
#############################################
[aws info]
# Leave everything commented out to use the default boto3 credential chain.
# Use a named profile from ~/.aws/credentials
#AWS_PROFILE = default
# or explicit keys
#AWS_ACCESS_KEY_ID = #your_aws_access_key_id
#AWS_SECRET_ACCESS_KEY = #your_secret_access_key
#AWS_SESSION_TOKEN = #your_session_token
# (defaults to us-east-1 if not specified)
#AWS_REGION_NAME = eu-west-1

[cloudfront]
#ENABLE_INVALIDATION = True
#INVALIDATION_PATHS = /*
#WAIT_FOR_INVALIDATION = False
# seconds to wait for an invalidation to complete
#MAX_WAIT_TIME = 300

[versioning]
# prefix of the per-deployment key namespace (versioned strategy only)
#VERSION_PREFIX = v

###########################
## Defining Static Sites ##
###########################
# Sites using a bucket directly:
#[site docs]
#LOCAL_PATH = ~/src/docs
#DIST_DIRECTORY = build
#BUCKET_NAME = docs.example.com
#DISTRIBUTION_ID = E2QWRUHAPOMQZL

# Sites whose bucket comes from a deployed stack (requires
# ENABLE_REMOTE_DEPLOYMENT = True):
#[site web]
#LOCAL_PATH = ~/src/web
#STACK_NAME = web-frontend-prod

# Sites can extend other sites:
#[site web-staging]
#EXTENDS = web
#STACK_NAME = web-frontend-staging
"""

DASHES = '-' * 10
copy_below = ' '.join([DASHES, 'COPY BELOW THIS LINE', DASHES])
end_copy = ' '.join([DASHES, 'END COPY', DASHES])
copy_paste_template = '\n'.join([copy_below, config_template, end_copy]) + '\n'
