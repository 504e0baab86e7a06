"""
Tests for the session REST API and Socket.IO events
"""

import threading
import unittest

from auction import Position, parse_bid
from bidding_system import Hand
from web import Session, SessionNotFoundError, SessionStore, app, socketio
from web import dashboard

# A full deal: North 1NT opener, South has five hearts and 7 HCP
DEAL = [
    'SAQ2HKJ4DKJ3CQ987',   # North, 16 HCP
    'SJT9HQT9DQT9CAKJT',   # East, 13 HCP
    'SK8765HA8765D8C65',   # South, 7 HCP
    'S43H32DA76542C432',   # West, 4 HCP
]


def fixed_session():
    return dashboard.sessions.add(Session([Hand(lin) for lin in DEAL]))


class TestSessionStore(unittest.TestCase):
    """Store-level behaviour without HTTP"""

    def test_create_deals_four_hands(self):
        store = SessionStore()
        session = store.create()
        self.assertEqual(len(store), 1)
        self.assertEqual(sorted(session.hands), list(Position))
        self.assertEqual(sum(hand.hcp for hand in session.hands.values()), 40)
        self.assertTrue(all(len(hand) == 13 for hand in session.hands.values()))

    def test_session_needs_full_hands(self):
        """Every seat must hold exactly 13 cards"""
        with self.assertRaises(ValueError):
            Session([Hand(lin) for lin in DEAL[:3]])
        with self.assertRaises(ValueError):
            Session([Hand(lin) for lin in DEAL[:3]] + [Hand('S43H32DA76542C43')])

    def test_unknown_session(self):
        with self.assertRaises(SessionNotFoundError):
            SessionStore().snapshot('missing')

    def test_concurrent_bids_take_turns(self):
        """Only one of several racing submissions for a seat succeeds"""
        store = SessionStore()
        session = store.add(Session([Hand(lin) for lin in DEAL]))
        results = []

        def submit():
            try:
                store.submit_bid(session.id, Position.NORTH, parse_bid('1NT'))
                results.append('ok')
            except Exception as e:
                results.append(type(e).__name__)

        threads = [threading.Thread(target=submit) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(results.count('ok'), 1)
        self.assertEqual(len(session.auction), 1)


class TestSessionApi(unittest.TestCase):
    """HTTP endpoints"""

    def setUp(self):
        app.config['TESTING'] = True
        self.client = app.test_client()
        self.session = fixed_session()
        self.base = f'/api/sessions/{self.session.id}'

    def bid(self, position, bid):
        return self.client.post(f'{self.base}/bid', json={'position': position, 'bid': bid})

    def robot(self):
        return self.client.post(f'{self.base}/robot-bid')

    def test_create_session(self):
        response = self.client.post('/api/sessions')
        self.assertEqual(response.status_code, 201)
        data = response.get_json()
        self.assertEqual(data['dealer'], 'N')
        self.assertEqual(data['turn'], 'N')
        self.assertEqual(len(data['players']), 4)
        self.assertEqual(sum(player['hcp'] for player in data['players']), 40)
        self.assertEqual(data['auction'], [])
        self.assertFalse(data['complete'])

    def test_get_session(self):
        data = self.client.get(self.base).get_json()
        self.assertEqual(data['id'], self.session.id)
        north = data['players'][0]
        self.assertEqual(north['position'], 'N')
        self.assertEqual(north['hcp'], 16)
        self.assertEqual(north['spades'], 'A Q 2')

    def test_unknown_session_404(self):
        response = self.client.get('/api/sessions/nope')
        self.assertEqual(response.status_code, 404)
        self.assertIn('error', response.get_json())

    def test_submit_bid(self):
        response = self.bid('N', '1nt')
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data['turn'], 'E')
        self.assertEqual(data['auction'][0]['bid'], '1NT')
        self.assertEqual(data['auction'][0]['strain'], 'NT')

    def test_out_of_turn_409(self):
        response = self.bid('S', '1C')
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()['error'], "it's North's turn")

    def test_illegal_bid_422(self):
        self.bid('N', '1NT')
        response = self.bid('E', '1H')
        self.assertEqual(response.status_code, 422)

    def test_malformed_bid_400(self):
        response = self.bid('N', '8C')
        self.assertEqual(response.status_code, 400)
        self.assertIn('between 1 and 7', response.get_json()['error'])

    def test_unicode_digit_bid_400(self):
        response = self.bid('N', '²C')
        self.assertEqual(response.status_code, 400)
        self.assertIn('invalid bid format', response.get_json()['error'])

    def test_bad_position_400(self):
        self.assertEqual(self.bid('Q', '1C').status_code, 400)

    def test_missing_body_400(self):
        response = self.client.post(f'{self.base}/bid', data='not json')
        self.assertEqual(response.status_code, 400)

    def test_robot_bid(self):
        response = self.robot()
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data['position'], 'N')
        self.assertEqual(data['bid'], '1NT')
        self.assertEqual(data['session']['turn'], 'E')

    def test_full_auction(self):
        """Transfer, super-accept, and the auction closes on 3H by North"""
        self.robot()                                   # N 1NT
        self.robot()                                   # E Pass
        self.assertEqual(self.bid('S', '2D').status_code, 200)
        self.robot()                                   # W Pass
        self.assertEqual(self.robot().get_json()['bid'], '3H')
        self.robot()                                   # E Pass
        self.bid('S', 'pass')
        data = self.robot().get_json()['session']      # W Pass

        self.assertTrue(data['complete'])
        self.assertFalse(data['passedOut'])
        self.assertIsNone(data['turn'])
        self.assertEqual(data['contract']['level'], 3)
        self.assertEqual(data['contract']['strain'], 'H')
        self.assertEqual(data['contract']['declarer'], 'N')

        response = self.bid('N', '4H')
        self.assertEqual(response.status_code, 409)
        self.assertEqual(self.robot().status_code, 409)

    def test_passed_out(self):
        for position in 'NESW':
            data = self.bid(position, 'p').get_json()
        self.assertTrue(data['passedOut'])
        self.assertFalse(data['complete'])
        self.assertIsNone(data['contract'])

    def test_evaluate_recommended(self):
        self.robot()
        self.robot()
        response = self.client.post('/api/evaluate-bid', json={
            'sessionId': self.session.id, 'position': 'S', 'bid': '2D'})
        data = response.get_json()
        self.assertTrue(data['isRecommended'])
        self.assertEqual(data['recommendedBid'], '2D')

    def test_evaluate_not_recommended(self):
        self.robot()
        self.robot()
        data = self.client.post('/api/evaluate-bid', json={
            'sessionId': self.session.id, 'position': 'S', 'bid': '2C'}).get_json()
        self.assertFalse(data['isRecommended'])
        self.assertEqual(data['recommendedBid'], '2D')
        self.assertEqual(data['explanation'], 'With 7 HCP, the recommended bid is 2♦')

    def test_evaluate_errors(self):
        response = self.client.post('/api/evaluate-bid', json={'position': 'S', 'bid': '2C'})
        self.assertEqual(response.status_code, 400)
        response = self.client.post('/api/evaluate-bid', json={
            'sessionId': 'nope', 'position': 'S', 'bid': '2C'})
        self.assertEqual(response.status_code, 404)

    def test_index_page(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)
        self.assertIn(b'Bid Tutor', response.data)


class TestSocketEvents(unittest.TestCase):
    """Socket.IO push updates"""

    def setUp(self):
        app.config['TESTING'] = True
        self.http = app.test_client()
        self.sio = socketio.test_client(app, flask_test_client=self.http)
        self.sio.get_received()

    def tearDown(self):
        self.sio.disconnect()

    def test_session_created_event(self):
        session_id = self.http.post('/api/sessions').get_json()['id']
        events = {event['name']: event['args'][0] for event in self.sio.get_received()}
        self.assertIn('session_created', events)
        self.assertEqual(events['session_created']['id'], session_id)

    def test_bid_and_completion_events(self):
        session = fixed_session()
        for position in 'NESW':
            self.http.post(f'/api/sessions/{session.id}/bid', json={'position': position, 'bid': 'pass'})
        names = [event['name'] for event in self.sio.get_received()]
        self.assertEqual(names.count('bid_made'), 4)
        self.assertIn('auction_complete', names)

    def test_request_state(self):
        session = fixed_session()
        self.sio.emit('request_state', {'id': session.id})
        events = self.sio.get_received()
        self.assertEqual(events[-1]['name'], 'game_state')
        self.assertEqual(events[-1]['args'][0]['id'], session.id)

    def test_request_unknown_state(self):
        self.sio.emit('request_state', {'id': 'nope'})
        self.assertEqual(self.sio.get_received()[-1]['name'], 'table_error')


if __name__ == '__main__':
    unittest.main()
