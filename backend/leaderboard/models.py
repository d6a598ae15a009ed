from leaderboard import db

class ScoreRecord(db.Model):
    __tablename__ = 'score_record'
    __table_args__ = (
        db.UniqueConstraint('game_name', 'player_name', name='uq_score_record_game_player'),
        db.Index('ix_score_record_game_score', 'game_name', 'score'),
    )
    id = db.Column(db.Integer, primary_key=True)
    game_name = db.Column(db.String(64), nullable=False)
    player_name = db.Column(db.String(20), nullable=False)
    # 2**53 - 1 does not fit a 32-bit INTEGER on Postgres
    score = db.Column(db.BigInteger, nullable=False)
    # Wall-clock time of the last write, informational only
    submitted_at = db.Column(db.Float, nullable=False)
    # Store-assigned write sequence; earlier arrivals rank first on ties
    arrival = db.Column(db.BigInteger, nullable=False, server_default='0')

    def to_dict(self):
        return {
            'id': self.id,
            'game_name': self.game_name,
            'player_name': self.player_name,
            'score': self.score,
            'submitted_at': self.submitted_at,
            'arrival': self.arrival,
        }

    def __repr__(self):
        return f'<ScoreRecord {self.game_name} {self.player_name}={self.score}>'
