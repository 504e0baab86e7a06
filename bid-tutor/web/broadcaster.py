"""
Socket.IO Event Broadcaster
Pushes table events to every connected browser
"""


class TableBroadcaster:
    """Broadcasts auction events to all connected clients"""

    def __init__(self, socketio):
        self.socketio = socketio

    def broadcast_session_created(self, session):
        self.socketio.emit('session_created', {
            'id': session['id'],
            'dealer': session['dealer'],
            'turn': session['turn'],
        })
        print(f"📤 Broadcasted new table: {session['id']}")

    def broadcast_bid(self, session, position, bid, reasoning=None):
        """Broadcast a bid, and the final contract once the auction ends"""
        self.socketio.emit('bid_made', {
            'id': session['id'],
            'position': position.letter,
            'bid': bid.code,
            'display': str(bid),
            'reasoning': reasoning,
            'turn': session['turn'],
        })

        if session['complete'] or session['passedOut']:
            self.socketio.emit('auction_complete', {
                'id': session['id'],
                'contract': session['contract'],
                'passedOut': session['passedOut'],
            })
            if session['passedOut']:
                print(f"📤 Broadcasted passed-out board: {session['id']}")
            else:
                print(f"📤 Broadcasted contract: {session['contract']['text']}")
