def _events(sio_client, name):
    return [pkt['args'][0] for pkt in sio_client.get_received('/ws') if pkt['name'] == name]


def test_socket_connect_and_join(sio_client):
    assert sio_client.is_connected('/ws')
    sio_client.get_received('/ws')

    sio_client.emit('join_game', {'game_id': 7}, namespace='/ws')
    received = sio_client.get_received('/ws')
    joined = [pkt for pkt in received if pkt['name'] == 'joined']
    assert joined and joined[0]['args'][0]['room'] == 'game:7'


def test_join_requires_game_id(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_game', {}, namespace='/ws')
    assert any(pkt['name'] == 'error' for pkt in sio_client.get_received('/ws'))


def test_ping_pong(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'t': 1}, namespace='/ws')
    assert _events(sio_client, 'pong') == [{'t': 1}]


def test_turn_end_is_broadcast_to_game_room(active_game, end_turn, sio_client):
    game = active_game({'Alice': 1, 'Bob': 2})
    bob = next(p for p in game['players'] if p['name'] == 'Bob')
    sio_client.emit('join_game', {'game_id': game['id']}, namespace='/ws')
    sio_client.get_received('/ws')

    end_turn(game['id'], duration=900)
    events = _events(sio_client, 'turn_ended')
    assert len(events) == 1
    assert events[0]['next_player_id'] == bob['id']
    assert events[0]['turn_history']['turn_duration_ms'] == 900
    assert events[0]['game']['current_turn'] == 1


def test_all_passed_and_round_events(client, active_game, end_turn, sio_client):
    game = active_game({'Alice': 1, 'Bob': 2})
    gid = game['id']
    sio_client.emit('join_game', {'game_id': gid}, namespace='/ws')
    sio_client.get_received('/ws')

    end_turn(gid, action='pass')
    end_turn(gid, action='pass')
    received = sio_client.get_received('/ws')
    names = [pkt['name'] for pkt in received]
    assert names.count('turn_ended') == 1
    assert names.count('all_passed') == 1
    all_passed = next(pkt['args'][0] for pkt in received if pkt['name'] == 'all_passed')
    assert all_passed['game']['status'] == 'paused'

    client.post('/api/rounds/next', json={'game_id': gid})
    assert _events(sio_client, 'round_ended')[0]['game']['current_round'] == 2


def test_other_games_do_not_receive_events(active_game, end_turn, sio_client):
    watched = active_game({'Alice': 1, 'Bob': 2})
    other = active_game({'Cara': 1, 'Dan': 2})
    sio_client.emit('join_game', {'game_id': watched['id']}, namespace='/ws')
    sio_client.get_received('/ws')

    end_turn(other['id'])
    assert _events(sio_client, 'turn_ended') == []


def test_leave_game_stops_events(active_game, end_turn, sio_client):
    game = active_game({'Alice': 1, 'Bob': 2})
    sio_client.emit('join_game', {'game_id': game['id']}, namespace='/ws')
    sio_client.emit('leave_game', {'game_id': game['id']}, namespace='/ws')
    assert any(pkt['name'] == 'left' for pkt in sio_client.get_received('/ws'))

    end_turn(game['id'])
    assert _events(sio_client, 'turn_ended') == []


def test_broadcast_failure_does_not_fail_request(monkeypatch, active_game, end_turn):
    from turn_tracker import socketio

    def boom(*args, **kwargs):
        raise RuntimeError('transport down')

    game = active_game({'Alice': 1, 'Bob': 2})
    monkeypatch.setattr(socketio, 'emit', boom)
    res = end_turn(game['id'])
    assert res.status_code == 200
