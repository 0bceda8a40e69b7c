"""
Tax Settings Routes

Rates are serialised with the opaque updateApi / deleteApi URLs the rate
row editor calls.
"""

from flask import jsonify, request, url_for

from storeadmin.admin.guard import admin_required
from storeadmin.errors import ValidationError
from storeadmin.services import tax as tax_service
from storeadmin.tax import tax_bp


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')
    return data


def serialize_rate(rate):
    return {
        'uuid': rate.uuid,
        'name': rate.name,
        'rate': rate.rate,
        'isCompound': rate.is_compound,
        'priority': rate.priority,
        'country': rate.country,
        'province': rate.province,
        'postcode': rate.postcode,
        'updateApi': url_for('tax.update_rate', rate_uuid=rate.uuid),
        'deleteApi': url_for('tax.delete_rate', rate_uuid=rate.uuid),
    }


def serialize_class(tax_class):
    return {
        'uuid': tax_class.uuid,
        'name': tax_class.name,
        'rates': [serialize_rate(r) for r in tax_class.rates],
        'addRateApi': url_for('tax.create_rate', class_uuid=tax_class.uuid),
    }


@tax_bp.route('/tax-classes')
@admin_required
def list_classes():
    classes = tax_service.list_tax_classes()
    return jsonify({'data': [serialize_class(c) for c in classes]})


@tax_bp.route('/tax-classes', methods=['POST'])
@admin_required
def create_class():
    tax_class = tax_service.create_tax_class(_json_body().get('name'))
    return jsonify({'data': serialize_class(tax_class)}), 201


@tax_bp.route('/tax-classes/<class_uuid>/rates', methods=['POST'])
@admin_required
def create_rate(class_uuid):
    rate = tax_service.create_tax_rate(class_uuid, _json_body())
    return jsonify({'data': serialize_rate(rate)}), 201


@tax_bp.route('/tax-rates/<rate_uuid>', methods=['PATCH'])
@admin_required
def update_rate(rate_uuid):
    rate = tax_service.update_tax_rate(rate_uuid, _json_body())
    return jsonify({'data': serialize_rate(rate)})


@tax_bp.route('/tax-rates/<rate_uuid>', methods=['DELETE'])
@admin_required
def delete_rate(rate_uuid):
    tax_service.delete_tax_rate(rate_uuid)
    return jsonify({'data': {'uuid': rate_uuid}})
