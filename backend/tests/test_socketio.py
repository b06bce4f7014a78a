from tenpercent.services.rooms.controller import WAITING_WARNING

WAITING = WAITING_WARNING.format(min_players=2)


def _events(client, name):
    return [pkt['args'][0] for pkt in client.get_received() if pkt['name'] == name]


def _received(client):
    out = {}
    for pkt in client.get_received():
        out.setdefault(pkt['name'], []).append(pkt['args'][0] if pkt['args'] else None)
    return out


def test_connect_acknowledged(sio_client):
    assert sio_client.is_connected()
    received = _received(sio_client)
    [ack] = received['connected']
    assert isinstance(ack['sid'], str) and ack['sid']
    # the acknowledgement is transport-only; no room is created
    assert set(received) == {'connected'}


def test_join_sends_timers_snapshot_and_warning(sio_client):
    sio_client.get_received()
    sio_client.emit('joinRoom', {'roomId': 'r1', 'name': 'Ann', 'startingBet': 3})
    received = _received(sio_client)

    assert received['allowedTimers'] == [{'options': [0.1, 1.0, 10.0, 60.0], 'current': 1}]
    [snapshot] = received['playersUpdate']
    assert [p['name'] for p in snapshot.values()] == ['Ann']
    assert 'declaredBet' not in list(snapshot.values())[0]
    assert received['warning'] == [WAITING]


def test_join_without_room_id_is_ignored(flask_app, sio_client):
    sio_client.get_received()
    sio_client.emit('joinRoom', {'name': 'Ann'})
    sio_client.emit('joinRoom', 'not-a-dict')
    assert sio_client.get_received() == []
    assert flask_app.extensions['rooms'].list_rooms() == []


def test_second_player_starts_round_and_disconnect_pauses(flask_app, make_sio_client):
    a = make_sio_client()
    b = make_sio_client()
    a.emit('joinRoom', {'roomId': 'r1', 'name': 'Ann'})
    a.get_received()

    b.emit('joinRoom', {'roomId': 'r1', 'name': 'Bob'})
    got = _received(a)
    assert got['warning'] == ['']
    assert got['timer'] == [1.0]
    assert len(got['playersUpdate'][-1]) == 2

    controller = flask_app.extensions['rooms']
    assert controller.room_state('r1')['counting'] is True

    b.disconnect()
    got = _received(a)
    assert got['warning'] == [WAITING]
    assert [p['name'] for p in got['playersUpdate'][-1].values()] == ['Ann']
    assert controller.room_state('r1')['counting'] is False


def test_round_result_reaches_every_member(flask_app, make_sio_client, finish_round):
    a = make_sio_client()
    b = make_sio_client()
    a.emit('joinRoom', {'roomId': 'r1', 'name': 'Ann', 'startingBet': 4})
    b.emit('joinRoom', {'roomId': 'r1', 'name': 'Bob', 'startingBet': 6})
    a.get_received()
    b.get_received()

    finish_round(flask_app.extensions['rooms'], 'r1')
    for client in (a, b):
        [result] = _events(client, 'roundResult')
        assert result['roomId'] == 'r1'
        assert result['roundIndex'] == 1
        deltas = [p['lastResult']['delta'] for p in result['players'].values()]
        assert abs(sum(deltas)) < 1e-4
        assert result['players'][result['loser']]['lastResult']['win'] is False


def test_set_bet_is_silent(flask_app, make_sio_client):
    a = make_sio_client()
    b = make_sio_client()
    a.emit('joinRoom', {'roomId': 'r1'})
    b.emit('joinRoom', {'roomId': 'r1'})
    a.get_received()
    b.get_received()

    a.emit('setBet', {'roomId': 'r1', 'bet': 'NaN'})
    a.emit('setBet', {'roomId': 'r1', 'bet': 42})
    assert a.get_received() == []
    assert b.get_received() == []
    room = flask_app.extensions['rooms'].registry.get('r1')
    assert sorted(p.declared_bet for p in room.players.values()) == [5.0, 10.0]


def test_set_name_broadcasts(make_sio_client):
    a = make_sio_client()
    b = make_sio_client()
    a.emit('joinRoom', {'roomId': 'r1', 'name': 'Ann'})
    b.emit('joinRoom', {'roomId': 'r1', 'name': 'Bob'})
    b.get_received()

    a.emit('setName', {'roomId': 'r1', 'name': 'Annabel'})
    [snapshot] = _events(b, 'playersUpdate')
    assert sorted(p['name'] for p in snapshot.values()) == ['Annabel', 'Bob']


def test_rejected_timer_only_answers_requester(flask_app, make_sio_client):
    a = make_sio_client()
    b = make_sio_client()
    a.emit('joinRoom', {'roomId': 'r1'})
    b.emit('joinRoom', {'roomId': 'r1'})
    a.get_received()
    b.get_received()

    a.emit('setTimer', {'roomId': 'r1', 'timer': 7})
    assert _events(a, 'allowedTimers') == [{'options': [0.1, 1.0, 10.0, 60.0], 'current': 1}]
    assert b.get_received() == []


def test_accepted_timer_is_broadcast(flask_app, make_sio_client):
    a = make_sio_client()
    b = make_sio_client()
    a.emit('joinRoom', {'roomId': 'r1'})
    b.emit('joinRoom', {'roomId': 'r1'})
    b.get_received()

    a.emit('setTimer', {'roomId': 'r1', 'timer': '60'})
    assert _events(b, 'allowedTimers') == [{'options': [0.1, 1.0, 10.0, 60.0], 'current': 60}]
    assert flask_app.extensions['rooms'].room_state('r1')['roundTimer'] == 60
