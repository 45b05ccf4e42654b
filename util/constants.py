# util/constants.py
import re


class InternalURIs:
    DATA = "/data"
    DATA_ITEM = DATA + "/{name}"
    FAKE_DATA = "/fake_data"
    ASK_FOR_ACCESS_TOKEN = "/ask_for_access_token"
    COMPLAINT = "/complaint"
    COMPLAINT_ITEM = COMPLAINT + "/{uuid}"
    INTERCEPT = "/intercept"
    INTERCEPT_V2 = INTERCEPT + "/v2"
    REPLIES = "/replies"
    REPLIES_ITEM = REPLIES + "/{uuid}"
    PROBLEMATIC = "/problematic"
    UPLOAD_FILES = "/upload-files/{uuid}"
    FILES = "/files/{uuid}"
    FILE_ITEM = FILES + "/{file_id}"
    HEALTH = "/healthz"


class ExternalURIs:
    RECAPTCHA_ASSESSMENT = (
        "https://recaptchaenterprise.googleapis.com/v1/projects/{project}/assessments"
    )


SAFE_NAME_PATTERN = re.compile(r"[A-Za-z0-9._-]+")
UUID_V4_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-4[0-9a-fA-F]{3}-[89ABab][0-9a-fA-F]{3}-[0-9a-fA-F]{12}"
)

REDACTED = "[REDACTED]"

# Columns a BBC submission may populate, in table order.
BBC_FIELDS = (
    "title",
    "description",
    "emailaddress",
    "firstname",
    "lastname",
    "salutation",
    "generalissue1",
    "intro_text",
    "iswelsh",
    "liveorondemand",
    "localradio",
    "make",
    "moderation_text",
    "network",
    "outside_the_uk",
    "platform",
    "programme",
    "programmeid",
    "reception_text",
    "redbuttonfault",
    "region",
    "responserequired",
    "servicetv",
    "sounds_text",
    "sourceurl",
    "subject",
    "transmissiondate",
    "transmissiontime",
    "under18",
    "verifyform",
    "complaint_nature",
    "complaint_nature_sounds",
)
