"""
Web Server for the Bid Tutor
REST endpoints for practice tables plus Socket.IO push updates
"""

import traceback

from flask import Flask, jsonify, render_template, request
from flask_cors import CORS
from flask_socketio import SocketIO, emit
from werkzeug.exceptions import BadRequest, HTTPException

from auction import AuctionClosedError, BidParseError, IllegalBidError, OutOfTurnError, parse_bid, parse_position
from bidding_system import PolishClubBidding

from .broadcaster import TableBroadcaster
from .state import SessionNotFoundError, SessionStore

DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 5001

# Initialize Flask app
app = Flask(__name__)
app.config['SECRET_KEY'] = 'bid-tutor-secret'
CORS(app)

# Initialize Socket.IO
socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')

sessions = SessionStore()
engine = PolishClubBidding()
broadcaster = TableBroadcaster(socketio)


def _error(message, status):
    return jsonify({'error': message}), status


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("request body must be a JSON object")
    return data


def _read_position(data, field='position'):
    try:
        return parse_position(data.get(field, ''))
    except ValueError as e:
        raise BadRequest(str(e))


# ==================== Error Handlers ====================

@app.errorhandler(BidParseError)
def handle_parse_error(e):
    return _error(str(e), 400)


@app.errorhandler(IllegalBidError)
def handle_illegal_bid(e):
    return _error(str(e), 422)


@app.errorhandler(OutOfTurnError)
def handle_out_of_turn(e):
    return _error(str(e), 409)


@app.errorhandler(AuctionClosedError)
def handle_auction_closed(e):
    return _error(str(e), 409)


@app.errorhandler(SessionNotFoundError)
def handle_unknown_session(e):
    return _error(str(e), 404)


@app.errorhandler(Exception)
def handle_unexpected(e):
    if isinstance(e, HTTPException):
        return _error(e.description, e.code)
    print(f"❌ Error handling {request.method} {request.path}: {e}")
    traceback.print_exc()
    return _error("internal server error", 500)


# ==================== Routes ====================

@app.route('/')
def index():
    """Serve the practice table page"""
    return render_template('index.html')


@app.route('/api/sessions', methods=['POST'])
def create_session():
    """Deal a new board; North bids first"""
    session = sessions.snapshot(sessions.create().id)
    broadcaster.broadcast_session_created(session)
    return jsonify(session), 201


@app.route('/api/sessions/<session_id>', methods=['GET'])
def get_session(session_id):
    return jsonify(sessions.snapshot(session_id))


@app.route('/api/sessions/<session_id>/bid', methods=['POST'])
def submit_bid(session_id):
    """
    Record a player's bid

    Body: {"position": "S", "bid": "1NT"}
    """
    data = _json_body()
    position = _read_position(data)
    bid = parse_bid(data.get('bid', ''))

    session = sessions.submit_bid(session_id, position, bid)
    broadcaster.broadcast_bid(session, position, bid)
    return jsonify(session)


@app.route('/api/sessions/<session_id>/robot-bid', methods=['POST'])
def robot_bid(session_id):
    """Let the engine bid for the seat on turn"""
    position, bid, reasoning, session = sessions.submit_robot_bid(session_id, engine)
    broadcaster.broadcast_bid(session, position, bid, reasoning)
    return jsonify({
        'position': position.letter,
        'bid': bid.code,
        'reasoning': reasoning,
        'session': session,
    })


@app.route('/api/evaluate-bid', methods=['POST'])
def evaluate_bid():
    """
    Check a proposed bid against the engine's recommendation

    Body: {"sessionId": "...", "position": "S", "bid": "2C"}
    """
    data = _json_body()
    session_id = data.get('sessionId')
    if not session_id:
        raise BadRequest("sessionId is required")
    position = _read_position(data)
    bid = parse_bid(data.get('bid', ''))

    result = sessions.read(
        session_id,
        lambda session: engine.explain(session.hands[position], session.auction, position, bid),
    )
    result['bid'] = bid.code
    result['position'] = position.letter
    return jsonify(result)


# ==================== Socket.IO Handlers ====================

@socketio.on('connect')
def handle_connect(auth=None):
    """Handle client connection"""
    print('🌐 Table client connected')


@socketio.on('disconnect')
def handle_disconnect(reason=None):
    """Handle client disconnection"""
    print('👋 Table client disconnected')


@socketio.on('request_state')
def handle_request_state(data):
    """Send one table's state to the client that asked"""
    session_id = (data or {}).get('id')
    try:
        emit('game_state', sessions.snapshot(session_id))
    except SessionNotFoundError as e:
        print(f"⚠️  {e}")
        emit('table_error', {'error': str(e)})


def start_server(host=DEFAULT_HOST, port=DEFAULT_PORT, debug=False):
    """
    Start the tutor web server

    Args:
        host: Host address (default: all interfaces)
        port: Port number (default: 5001)
        debug: Debug mode (default: False)
    """
    print(f"🌐 Starting bid tutor on http://localhost:{port}")
    socketio.run(app, host=host, port=port, debug=debug, allow_unsafe_werkzeug=True)
