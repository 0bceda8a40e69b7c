"""
Models Package

Exports all models for easy importing.
"""

from storeadmin.models.admin_user import AdminUser, AdministratorRecord
from storeadmin.models.session import AdminSession
from storeadmin.models.tax import TaxClass, TaxRate

__all__ = ['AdminUser', 'AdministratorRecord', 'AdminSession', 'TaxClass', 'TaxRate']
