import pytest

from shop_admin.services.admin_auth import AdminTokenGate
from shop_admin.services.errors import Unauthorized


def test_matching_token_is_allowed():
    AdminTokenGate("s3cret", "s3cret")()


@pytest.mark.parametrize(
    ("expected", "presented"),
    [("s3cret", "nope"), ("s3cret", None), (None, "s3cret"), (None, None), ("", "")],
)
def test_other_tokens_are_rejected(expected, presented):
    with pytest.raises(Unauthorized) as excinfo:
        AdminTokenGate(expected, presented)()
    assert excinfo.value.status_code == 401
