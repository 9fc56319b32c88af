from conftest import NAMESPACE, drain, payloads


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'SpeedWurdz' in res.get_json()['message']


def test_health(client):
    res = client.get('/health')
    assert res.status_code == 200
    data = res.get_json()
    assert data['status'] == 'ok'
    assert data['dictionaryWords'] > 1000
    assert data['users'] == 0
    assert data['tables'] == 0


def test_list_tables_empty(client):
    res = client.get('/api/tables')
    assert res.status_code == 200
    assert res.get_json() == {'tables': []}


def test_unknown_table_is_404(client):
    res = client.get('/api/tables/nope')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Table not found'}


def test_validate_word(client):
    res = client.get('/api/tables/dictionary/validate?word=cat')
    assert res.get_json() == {'word': 'CAT', 'valid': True}
    res = client.get('/api/tables/dictionary/validate?word=zq')
    assert res.get_json() == {'word': 'ZQ', 'valid': False}


def test_validate_word_requires_word(client):
    res = client.get('/api/tables/dictionary/validate')
    assert res.status_code == 400


def test_table_created_over_socket_is_listed(client, sio_client):
    sio_client.emit('join-lobby', 'alice', namespace=NAMESPACE)
    sio_client.emit('create-table', {'name': 'Fast', 'maxPlayers': 2}, namespace=NAMESPACE)
    table = payloads(drain(sio_client), 'table-joined')[0]
    assert table['startingTiles'] == 75

    listed = client.get('/api/tables').get_json()['tables']
    assert [t['id'] for t in listed] == [table['id']]

    detail = client.get(f"/api/tables/{table['id']}").get_json()
    assert detail['name'] == 'Fast'
    assert detail['host'] == 'alice'
    assert detail['gameState'] is None
    assert client.get('/health').get_json()['users'] == 1


def test_check_dictionary_command(flask_app):
    result = flask_app.test_cli_runner().invoke(args=['check-dictionary', 'cat', 'zq'])
    assert result.exit_code == 0
    assert 'words' in result.output
    assert 'CAT: valid' in result.output
    assert 'ZQ: invalid' in result.output
