"""
Tax Class and Tax Rate Models
"""

from storeadmin.extensions import db
from storeadmin.models.admin_user import new_uuid, utcnow


class TaxClass(db.Model):
    """Named group of tax rates (e.g. "Standard", "Reduced")"""
    __tablename__ = 'tax_class'

    id = db.Column('tax_class_id', db.Integer, primary_key=True)
    uuid = db.Column(db.String(36), unique=True, nullable=False, default=new_uuid)
    name = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    rates = db.relationship('TaxRate', backref='tax_class', lazy=True,
                            cascade='all, delete-orphan',
                            order_by='TaxRate.priority')

    def __repr__(self):
        return f'<TaxClass {self.name}>'


class TaxRate(db.Model):
    """A single rate row inside a tax class"""
    __tablename__ = 'tax_rate'

    id = db.Column('tax_rate_id', db.Integer, primary_key=True)
    uuid = db.Column(db.String(36), unique=True, nullable=False, default=new_uuid)
    tax_class_id = db.Column(db.Integer, db.ForeignKey('tax_class.tax_class_id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    rate = db.Column(db.Float, nullable=False, default=0.0)  # percent
    is_compound = db.Column(db.Boolean, nullable=False, default=False)
    priority = db.Column(db.Integer, nullable=False, default=0)
    country = db.Column(db.String(64), nullable=False, default='*')
    province = db.Column(db.String(64), nullable=False, default='*')
    postcode = db.Column(db.String(64), nullable=False, default='*')
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<TaxRate {self.name} {self.rate}%>'
