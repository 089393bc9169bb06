# api/departments/queries.py
from sqlalchemy import select, func, or_

from db_models.asset import Asset
from db_models.department import Department
from db_models.user import User


def select_all_departments():
    return select(Department).order_by(Department.name_native.asc(), Department.id.asc())


def select_department_by_id(department_id: int):
    return select(Department).where(Department.id == department_id)


def select_department_by_name(name: str):
    """Match either the native or the alternate name."""
    return (
        select(Department)
        .where(or_(Department.name_native == name, Department.name_alt == name))
        .order_by(Department.id.asc())
        .limit(1)
    )


def count_assets_in_department(department_id: int):
    return select(func.count(Asset.id)).where(Asset.department_id == department_id)


def count_users_in_department(department_id: int):
    return select(func.count(User.id)).where(User.department_id == department_id)
