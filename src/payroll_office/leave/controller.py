from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask, request

from ..auth.capabilities import Capability, current_identity, organization_scope, requires
from ..common.datetime_utils import now_utc, parse_iso_date
from ..common.validators import require_year
from ..web.owners import caller_employee, employee_owner, leave_owner
from ..web.responses import json_body, ok, optional_int

if TYPE_CHECKING:
    from ..container import Container

MANAGERS = (Capability.ADMIN, Capability.ORG_MANAGER)


def register(app: Flask, container: "Container") -> None:
    @app.route("/api/leave/apply", methods=["POST"], endpoint="api_leave_apply")
    @requires(Capability.SELF)
    def apply():
        data = json_body()
        employee = caller_employee(container)
        leave = container.leave_service.apply(
            employee_id=employee.employee_id,
            leave_type=data.get("type"),
            start_date=parse_iso_date(data.get("startDate")),
            end_date=parse_iso_date(data.get("endDate")),
            reason=data.get("reason"),
        )
        return ok(leave.to_dict(), status=201, message="Leave application submitted")

    @app.route("/api/leave/history/<int:employee_id>", methods=["GET"], endpoint="api_leave_history")
    @requires(*MANAGERS, Capability.SELF, owner=employee_owner(container))
    def history(employee_id: int):
        return ok([leave.to_dict() for leave in container.leave_service.history(employee_id)])

    @app.route("/api/leave/balance/<int:employee_id>", methods=["GET"], endpoint="api_leave_balance")
    @requires(*MANAGERS, Capability.SELF, owner=employee_owner(container))
    def balance(employee_id: int):
        year = request.args.get("year")
        year = require_year(year) if year else now_utc().year
        balances = container.leave_service.balance(employee_id, year=year)
        return ok({t.value: b.to_dict() for t, b in balances.items()})

    @app.route("/api/leave/pending", methods=["GET"], endpoint="api_leave_pending")
    @requires(*MANAGERS)
    def pending():
        organization_id = organization_scope(optional_int(request.args.get("organizationId"), "organizationId"))
        return ok([leave.to_dict() for leave in container.leave_service.pending_for_organization(organization_id)])

    @app.route("/api/leave/<int:leave_id>/approve", methods=["POST"], endpoint="api_leave_approve")
    @requires(*MANAGERS, owner=leave_owner(container))
    def approve(leave_id: int):
        leave = container.leave_service.approve(
            leave_id=leave_id,
            approver_id=current_identity().user_id,
            note=json_body().get("note") or "",
        )
        return ok(leave.to_dict(), message="Leave approved")

    @app.route("/api/leave/<int:leave_id>/reject", methods=["POST"], endpoint="api_leave_reject")
    @requires(*MANAGERS, owner=leave_owner(container))
    def reject(leave_id: int):
        leave = container.leave_service.reject(
            leave_id=leave_id,
            approver_id=current_identity().user_id,
            note=json_body().get("note") or "",
        )
        return ok(leave.to_dict(), message="Leave rejected")
