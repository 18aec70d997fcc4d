from __future__ import annotations

from flask import Flask, request

from ..common.validators import parse_enum
from ..common.web import current_employee_id, current_role, current_user_id, hr_required, json_body, login_required, ok
from ..core.enums import AssetCategory, AssetStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def _employee_id(body: dict) -> int:
    try:
        return int(body.get("employee_id"))
    except (TypeError, ValueError):
        raise ValidationError("Empleado es obligatorio")


def register(app: Flask, container: Container) -> None:
    inventory = container.inventory_service

    @app.route("/api/inventory", methods=["GET"], endpoint="list_inventory")
    @hr_required
    def list_inventory():
        return ok(inventory.list_items())

    @app.route("/api/inventory", methods=["POST"], endpoint="create_inventory_item")
    @hr_required
    def create_inventory_item():
        body = json_body()
        item_id = inventory.create_item(
            name=body.get("name", ""),
            category=parse_enum(AssetCategory, body.get("category") or "OTHER", "Categoría"),
            size=body.get("size"),
            quantity=body.get("quantity", 0),
            min_quantity=body.get("min_quantity", 0),
        )
        inventory.check_stock_levels(item_id)
        return ok({"item_id": item_id}, "Artículo creado", 201)

    @app.route("/api/inventory/<int:item_id>", methods=["PUT"], endpoint="update_inventory_item")
    @hr_required
    def update_inventory_item(item_id: int):
        body = json_body()
        inventory.update_item(
            item_id,
            name=body.get("name", ""),
            category=parse_enum(AssetCategory, body.get("category") or "OTHER", "Categoría"),
            size=body.get("size"),
            min_quantity=body.get("min_quantity", 0),
        )
        return ok(message="Artículo actualizado")

    @app.route("/api/inventory/<int:item_id>", methods=["DELETE"], endpoint="delete_inventory_item")
    @hr_required
    def delete_inventory_item(item_id: int):
        inventory.delete_item(item_id)
        return ok(message="Artículo eliminado")

    @app.route("/api/inventory/<int:item_id>/stock", methods=["POST"], endpoint="add_inventory_stock")
    @hr_required
    def add_inventory_stock(item_id: int):
        body = json_body()
        movement_id = inventory.add_stock(
            item_id=item_id, amount=body.get("amount"), user_id=current_user_id(), notes=body.get("notes")
        )
        return ok({"movement_id": movement_id}, "Stock actualizado")

    @app.route("/api/inventory/<int:item_id>/distribute", methods=["POST"], endpoint="distribute_inventory_item")
    @hr_required
    def distribute_inventory_item(item_id: int):
        body = json_body()
        asset_ids = inventory.distribute(
            item_id=item_id,
            employee_id=_employee_id(body),
            quantity=body.get("quantity", 1),
            user_id=current_user_id(),
            serial_number=body.get("serial_number"),
            notes=body.get("notes"),
        )
        return ok({"asset_ids": asset_ids}, "Material entregado", 201)

    @app.route("/api/inventory/<int:item_id>/movements", methods=["GET"], endpoint="inventory_movements")
    @hr_required
    def inventory_movements(item_id: int):
        return ok(inventory.movements(item_id))

    @app.route("/api/inventory/<int:item_id>/generate-receipt", methods=["POST"], endpoint="inventory_receipt")
    @hr_required
    def inventory_receipt(item_id: int):
        body = json_body()
        doc = container.document_service.generate_receipt_for_item(
            item_id,
            _employee_id(body),
            device_name=body.get("device_name"),
            serial_number=body.get("serial_number"),
        )
        return ok(doc, "Acta generada", 201)

    @app.route("/api/assets", methods=["GET"], endpoint="list_assets")
    @login_required
    def list_assets():
        raw_employee = request.args.get("employee_id")
        employee_id = int(raw_employee) if raw_employee and raw_employee.isdigit() else None
        if current_role() not in {Role.ADMIN, Role.HR}:
            own = current_employee_id()
            if employee_id is not None and employee_id != own:
                raise AuthorizationError("No tienes permisos")
            if own is None:
                return ok([])
            employee_id = own
        status = request.args.get("status")
        return ok(
            inventory.list_assets(
                employee_id=employee_id,
                status=parse_enum(AssetStatus, status, "Estado") if status else None,
            )
        )

    @app.route("/api/assets", methods=["POST"], endpoint="create_asset")
    @hr_required
    def create_asset():
        body = json_body()
        raw_employee = body.get("employee_id")
        asset_id = inventory.create_asset(
            employee_id=int(raw_employee) if raw_employee else None,
            category=parse_enum(AssetCategory, body.get("category") or "OTHER", "Categoría"),
            name=body.get("name", ""),
            serial_number=body.get("serial_number"),
            notes=body.get("notes"),
        )
        return ok({"asset_id": asset_id}, "Material registrado", 201)

    @app.route("/api/assets/<int:asset_id>/return", methods=["POST"], endpoint="return_asset")
    @hr_required
    def return_asset(asset_id: int):
        movement_id = inventory.return_asset(asset_id=asset_id, user_id=current_user_id(), notes=json_body().get("notes"))
        return ok({"movement_id": movement_id}, "Material devuelto")
