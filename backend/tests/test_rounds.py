def _state(client, game_id):
    return client.get(f'/api/games/{game_id}').get_json()


def _ids(state):
    return {p['name']: p['id'] for p in state['players']}


def _activate(client, new_game, names):
    state = new_game(names)
    assert client.patch(f"/api/games/{state['id']}", json={'status': 'active'}).status_code == 200
    return state


def test_start_round_seats_players_by_card(client, new_game):
    state = _activate(client, new_game, ('p1', 'p2', 'p4'))
    ids = _ids(state)
    assignments = [
        {'player_id': ids['p1'], 'card_number': 3},
        {'player_id': ids['p2'], 'card_number': 1},
        {'player_id': ids['p4'], 'card_number': 2},
    ]
    res = client.post('/api/rounds', json={'game_id': state['id'], 'strategy_assignments': assignments})
    assert res.status_code == 201
    data = res.get_json()
    game = data['game']
    orders = {p['name']: p['turn_order'] for p in game['players']}
    assert orders == {'p1': 3, 'p2': 1, 'p4': 2}
    assert {p['name']: p['strategy_card'] for p in game['players']} == orders
    assert game['current_player_turn_order'] == 1
    assert game['current_turn'] == 0
    assert game['status'] == 'active'
    assert not any(p['has_passed'] for p in game['players'])
    # Players come back ordered by their new seats
    assert [p['name'] for p in game['players']] == ['p2', 'p4', 'p1']

    round_ = data['round']
    assert round_['round_number'] == 1
    assert round_['ended_at'] is None
    assert [(pk['player_id'], pk['card_number'], pk['pick_order']) for pk in round_['strategy_picks']] == [
        (ids['p1'], 3, 0), (ids['p2'], 1, 1), (ids['p4'], 2, 2),
    ]
    assert round_['strategy_picks'][0]['card_name'] == 'Politics'


def test_lowest_assigned_card_starts(client, new_game):
    state = _activate(client, new_game, ('A', 'B'))
    ids = _ids(state)
    assignments = [{'player_id': ids['A'], 'card_number': 6}, {'player_id': ids['B'], 'card_number': 4}]
    game = client.post('/api/rounds', json={'game_id': state['id'], 'strategy_assignments': assignments}).get_json()['game']
    assert game['current_player_turn_order'] == 4
    assert game['current_player_id'] == ids['B']


def test_duplicate_card_is_rejected_without_writes(client, new_game):
    state = _activate(client, new_game, ('A', 'B'))
    ids = _ids(state)
    assignments = [{'player_id': ids['A'], 'card_number': 2}, {'player_id': ids['B'], 'card_number': 2}]
    res = client.post('/api/rounds', json={'game_id': state['id'], 'strategy_assignments': assignments})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'DUPLICATE_CARD'
    assert client.get(f"/api/games/{state['id']}/rounds").get_json() == []
    assert all(p['strategy_card'] is None for p in _state(client, state['id'])['players'])


def test_start_round_validation(client, new_game):
    state = _activate(client, new_game, ('A', 'B'))
    gid = state['id']
    ids = _ids(state)

    def post(assignments, game_id=gid):
        return client.post('/api/rounds', json={'game_id': game_id, 'strategy_assignments': assignments})

    assert post([]).status_code == 400
    assert post('nope').status_code == 400
    assert post([{'player_id': ids['A'], 'card_number': 9}, {'player_id': ids['B'], 'card_number': 1}]).status_code == 400
    assert post([{'player_id': ids['A'], 'card_number': 1}, {'player_id': ids['A'], 'card_number': 2}]).status_code == 400
    # Every player must hold a card
    assert post([{'player_id': ids['A'], 'card_number': 1}]).status_code == 400
    assert post([{'player_id': ids['A'], 'card_number': 1}, {'player_id': 999, 'card_number': 2}]).status_code == 404
    assert post([{'player_id': ids['A'], 'card_number': 1}], game_id=999).status_code == 404
    assert client.get(f'/api/games/{gid}/rounds').get_json() == []


def test_advance_round_closes_current_round(client, active_game, end_turn):
    game = active_game({'Alice': 1, 'Bob': 2})
    gid = game['id']
    end_turn(gid, action='pass')

    res = client.post('/api/rounds/next', json={'game_id': gid})
    assert res.status_code == 200
    after = res.get_json()['game']
    assert after['current_round'] == 2
    assert after['status'] == 'paused'
    assert all(p['strategy_card'] is None and not p['has_passed'] for p in after['players'])

    rounds = client.get(f'/api/games/{gid}/rounds').get_json()
    assert len(rounds) == 1
    assert rounds[0]['round_number'] == 1
    assert rounds[0]['ended_at'] is not None


def test_advance_round_without_round_row(client, new_game):
    state = _activate(client, new_game, ('A', 'B'))
    res = client.post('/api/rounds/next', json={'game_id': state['id']})
    assert res.status_code == 200
    assert res.get_json()['game']['current_round'] == 2
    assert client.get(f"/api/games/{state['id']}/rounds").get_json() == []


def test_round_cannot_start_before_activation(client, new_game):
    state = new_game(('Solo',))
    ids = _ids(state)
    assignments = [{'player_id': ids['Solo'], 'card_number': 1}]
    res = client.post('/api/rounds', json={'game_id': state['id'], 'strategy_assignments': assignments})
    assert res.status_code == 409
    assert res.get_json()['code'] == 'GAME_NOT_STARTED'
    after = _state(client, state['id'])
    assert after['status'] == 'setup'
    assert after['players'][0]['strategy_card'] is None
    assert client.get(f"/api/games/{state['id']}/rounds").get_json() == []


def test_advance_round_from_setup_is_illegal(client, new_game):
    state = new_game(('A', 'B'))
    res = client.post('/api/rounds/next', json={'game_id': state['id']})
    assert res.status_code == 409
    assert _state(client, state['id'])['current_round'] == 1


def test_advance_round_unknown_game(client):
    assert client.post('/api/rounds/next', json={'game_id': 999}).status_code == 404


def test_new_round_resumes_paused_game(client, active_game, end_turn):
    game = active_game({'Alice': 1, 'Bob': 2})
    gid = game['id']
    ids = _ids(game)
    end_turn(gid, action='pass')
    end_turn(gid, action='pass')
    assert _state(client, gid)['status'] == 'paused'

    client.post('/api/rounds/next', json={'game_id': gid})
    assignments = [{'player_id': ids['Alice'], 'card_number': 5}, {'player_id': ids['Bob'], 'card_number': 3}]
    data = client.post('/api/rounds', json={'game_id': gid, 'strategy_assignments': assignments}).get_json()
    assert data['round']['round_number'] == 2
    assert data['game']['status'] == 'active'
    assert data['game']['current_player_id'] == ids['Bob']

    rounds = client.get(f'/api/games/{gid}/rounds').get_json()
    assert [r['round_number'] for r in rounds] == [1, 2]
