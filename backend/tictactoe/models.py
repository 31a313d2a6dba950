from tictactoe import db
import json


class Room(db.Model):
    __tablename__ = 'room'
    id = db.Column(db.String(36), primary_key=True)
    # JSON-encoded {board, currentPlayer, won}
    state = db.Column(db.Text, nullable=False)

    def to_record(self):
        return json.loads(self.state)

    def set_record(self, record):
        self.state = json.dumps(record)
