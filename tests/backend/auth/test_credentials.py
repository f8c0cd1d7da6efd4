import pytest

from backend.auth.credentials import Identity, verify_credentials
from backend.auth.passwords import hash_password, verify_password
from backend.models.user import Role


def test_hash_password_produces_verifiable_salted_hash() -> None:
    first = hash_password('secret-pass')
    second = hash_password('secret-pass')

    assert first != second
    assert first != 'secret-pass'
    assert verify_password('secret-pass', first)
    assert verify_password('secret-pass', second)
    assert not verify_password('wrong-pass', first)


@pytest.mark.parametrize('stored_hash', ['', None, 'not-a-bcrypt-hash'])
def test_verify_password_rejects_empty_or_malformed_hash(stored_hash) -> None:
    assert verify_password('anything', stored_hash) is False


@pytest.mark.parametrize(('role', 'is_active'), [(Role.USER, True), (Role.USER, False), (Role.ADMIN, True)])
def test_verify_credentials_returns_identity_with_stored_role(db, make_user, role, is_active) -> None:
    user = make_user(email='voter@example.com', password='right-pass', role=role, is_active=is_active)

    identity = verify_credentials(db, 'voter@example.com', 'right-pass')

    assert identity == Identity(id=user.id, email='voter@example.com', name=user.full_name, role=role)
    assert 'password' not in identity.to_dict()
    assert 'password_hash' not in identity.to_dict()


def test_verify_credentials_rejects_wrong_password(db, make_user) -> None:
    make_user(email='voter@example.com', password='right-pass')

    assert verify_credentials(db, 'voter@example.com', 'wrong-pass') is None


def test_verify_credentials_rejects_unknown_email(db, make_user) -> None:
    make_user(email='voter@example.com', password='right-pass')

    assert verify_credentials(db, 'nobody@example.com', 'right-pass') is None


def test_verify_credentials_email_match_is_case_sensitive(db, make_user) -> None:
    make_user(email='Voter@example.com', password='right-pass')

    assert verify_credentials(db, 'voter@example.com', 'right-pass') is None
    assert verify_credentials(db, 'Voter@example.com', 'right-pass') is not None


@pytest.mark.parametrize(('email', 'password'), [('', 'pass'), ('a@b.c', ''), (None, None)])
def test_verify_credentials_rejects_missing_input(db, email, password) -> None:
    assert verify_credentials(db, email, password) is None


def test_verify_credentials_never_matches_oauth_only_account(db, make_user) -> None:
    user = make_user(email='fb@example.com')
    user.password_hash = ''
    db.commit()

    assert verify_credentials(db, 'fb@example.com', '') is None
    assert verify_credentials(db, 'fb@example.com', 'password123') is None
