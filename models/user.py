from extensions import db
from sqlalchemy import CheckConstraint

class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(6), unique=True, nullable=False)
    nickname = db.Column(db.String(100), nullable=True, index=True)
    email = db.Column(db.String(255), nullable=True, unique=True)
    role = db.Column(db.String, nullable=False, default='user')
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    team_memberships = db.relationship('TeamMember', back_populates='user', cascade="all, delete-orphan")
    notifications = db.relationship('Notification', backref='user', cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("role IN ('user', 'organizer', 'admin')", name="check_role"),
    )

    @property
    def display_name(self):
        return self.nickname or self.code

    def to_dict(self):
        return {
            'id': self.id,
            'code': self.code,
            'nickname': self.nickname,
            'email': self.email,
            'role': self.role,
        }
