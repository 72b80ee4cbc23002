from juslearn import models
from sqlmodel import select


def test_signup_login_scenario(client):
    r = client.post('/api/signup', json={'username': 'alice', 'email': 'a@x.com', 'password': 'pw123'})
    assert r.status_code == 200
    assert r.json() == {'message': 'User registered successfully', 'userId': 1}

    r2 = client.post('/api/signup', json={'username': 'bob', 'email': 'a@x.com', 'password': 'pw456'})
    assert r2.status_code == 409
    assert r2.json() == {'message': 'Email or username already in use.'}

    r3 = client.post('/api/login', json={'email': 'a@x.com', 'password': 'wrong'})
    assert r3.status_code == 401

    r4 = client.post('/api/login', json={'email': 'a@x.com', 'password': 'pw123'})
    assert r4.status_code == 200
    assert r4.json() == {'message': 'Login successful', 'userId': 1, 'username': 'alice'}


def test_duplicate_email_conflicts_with_same_username(client, signup):
    signup('alice', 'a@x.com', 'pw123')
    r = client.post('/api/signup', json={'username': 'alice', 'email': 'a@x.com', 'password': 'other'})
    assert r.status_code == 409


def test_same_username_different_email_is_allowed(client, signup):
    first = signup('alice', 'a@x.com', 'pw123')
    second = signup('alice', 'b@x.com', 'pw123')
    assert second != first


def test_signup_missing_fields(client):
    for body in ({'email': 'a@x.com', 'password': 'pw'}, {'username': 'a', 'password': 'pw'},
                 {'username': 'a', 'email': 'a@x.com'}, {'username': '', 'email': 'a@x.com', 'password': 'pw'}):
        r = client.post('/api/signup', json=body)
        assert r.status_code == 400
        assert r.json() == {'message': 'Missing required fields'}


def test_signup_without_body(client):
    r = client.post('/api/signup')
    assert r.status_code == 400
    assert r.json() == {'message': 'Missing required fields'}


def test_login_failures_are_indistinguishable(client, signup):
    signup('alice', 'a@x.com', 'pw123')
    wrong_pw = client.post('/api/login', json={'email': 'a@x.com', 'password': 'nope'})
    no_user = client.post('/api/login', json={'email': 'ghost@x.com', 'password': 'pw123'})
    assert wrong_pw.status_code == no_user.status_code == 401
    assert wrong_pw.json() == no_user.json() == {'message': 'Invalid credentials'}


def test_login_missing_fields_is_invalid_credentials(client, signup):
    signup('alice', 'a@x.com', 'pw123')
    r = client.post('/api/login', json={'email': 'a@x.com'})
    assert r.status_code == 401
    assert r.json() == {'message': 'Invalid credentials'}


def test_password_is_stored_hashed(client, signup):
    user_id = signup('alice', 'a@x.com', 'pw123')
    with client.app.state.store.session() as session:
        user = session.exec(select(models.User).where(models.User.id == user_id)).one()
    assert user.password_hash != 'pw123'
    assert user.password_hash.startswith('$pbkdf2-sha256$')


def test_hashing_failure_is_internal_error(client, monkeypatch):
    from juslearn import services

    class BrokenContext:
        def hash(self, _password):
            raise ValueError('backend unavailable')

    monkeypatch.setattr(services, 'password_context', lambda _rounds: BrokenContext())
    r = client.post('/api/signup', json={'username': 'alice', 'email': 'a@x.com', 'password': 'pw123'})
    assert r.status_code == 500
    assert r.json() == {'message': 'Internal server error during hashing.'}
    with client.app.state.store.session() as session:
        assert session.exec(select(models.User)).all() == []
