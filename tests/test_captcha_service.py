# tests/test_captcha_service.py
import httpx
import pytest
from service.captcha_service import CaptchaService
from tests.helpers import FakeRecaptcha, build_settings
from util.errors import DependencyError


def make_service(tmp_path, fake: FakeRecaptcha) -> CaptchaService:
    return CaptchaService(build_settings(tmp_path), transport=fake.transport)


async def test_assess_sends_token_action_and_site_key(tmp_path):
    fake = FakeRecaptcha(score=0.9)
    svc = make_service(tmp_path, fake)
    result = await svc.assess("tok-123")
    assert fake.calls == [
        {"event": {"token": "tok-123", "expectedAction": "get_data", "siteKey": "test-site"}}
    ]
    assert result.valid and result.score == 0.9 and result.action == "get_data"
    assert svc.passes(result)


@pytest.mark.parametrize(
    "fake",
    [
        FakeRecaptcha(score=0.49),
        FakeRecaptcha(score=0.9, action="login"),
        FakeRecaptcha(score=0.9, valid=False),
    ],
)
async def test_failing_assessments_do_not_pass(tmp_path, fake):
    svc = make_service(tmp_path, fake)
    assert svc.passes(await svc.assess("tok")) is False


async def test_threshold_is_inclusive(tmp_path):
    svc = make_service(tmp_path, FakeRecaptcha(score=0.5))
    assert svc.passes(await svc.assess("tok")) is True


async def test_upstream_error_status_raises_dependency_error(tmp_path):
    fake = FakeRecaptcha()
    fake.status_code = 503
    svc = make_service(tmp_path, fake)
    with pytest.raises(DependencyError):
        await svc.assess("tok")


async def test_network_error_raises_dependency_error(tmp_path):
    def _down(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    svc = CaptchaService(build_settings(tmp_path), transport=httpx.MockTransport(_down))
    with pytest.raises(DependencyError):
        await svc.assess("tok")


def test_project_is_interpolated_into_the_assessment_url(tmp_path):
    svc = CaptchaService(build_settings(tmp_path))
    assert "projects/test-project/assessments" in svc._url
