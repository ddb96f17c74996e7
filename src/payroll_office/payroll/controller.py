from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask, request

from ..auth.capabilities import Capability, authorize, current_identity, organization_scope, requires
from ..common.validators import require_choice, require_int
from ..core.enums import PayslipStatus
from ..web.owners import employee_owner, load_employee, owner_of, payslip_owner
from ..web.responses import json_body, ok, optional_int

if TYPE_CHECKING:
    from ..container import Container

MANAGERS = (Capability.ADMIN, Capability.ORG_MANAGER)


def register(app: Flask, container: "Container") -> None:
    @app.route("/api/payroll/generate", methods=["POST"], endpoint="api_payroll_generate")
    @requires(*MANAGERS)
    def generate_batch():
        data = json_body()
        organization_id = organization_scope(optional_int(data.get("organizationId"), "organizationId"))
        result = container.payslip_service.generate_for_organization(
            organization_id,
            month=data.get("month"),
            year=data.get("year"),
        )
        return ok(result.to_dict(), status=201, message=f"Generated {len(result.generated)} payslips")

    @app.route("/api/payslips/generate", methods=["POST"], endpoint="api_payslip_generate")
    @requires(*MANAGERS)
    def generate_one():
        data = json_body()
        employee = load_employee(container, require_int(data.get("employeeId"), "employeeId"))
        authorize(owner_of(employee), *MANAGERS)
        payslip = container.payslip_service.generate(
            employee.employee_id,
            month=data.get("month"),
            year=data.get("year"),
        )
        return ok(payslip.to_dict(), status=201)

    @app.route("/api/payroll/approve/<int:payslip_id>", methods=["POST"], endpoint="api_payroll_approve")
    @requires(*MANAGERS, owner=payslip_owner(container))
    def approve(payslip_id: int):
        payslip = container.payslip_service.approve(payslip_id, approver_id=current_identity().user_id)
        return ok(payslip.to_dict(), message="Payslip approved")

    @app.route("/api/payroll/reject/<int:payslip_id>", methods=["POST"], endpoint="api_payroll_reject")
    @requires(*MANAGERS, owner=payslip_owner(container))
    def reject(payslip_id: int):
        payslip = container.payslip_service.reject(
            payslip_id,
            approver_id=current_identity().user_id,
            reason=json_body().get("reason"),
        )
        return ok(payslip.to_dict(), message="Payslip rejected")

    @app.route("/api/payroll/mark-paid/<int:payslip_id>", methods=["POST"], endpoint="api_payroll_mark_paid")
    @requires(*MANAGERS, owner=payslip_owner(container))
    def mark_paid(payslip_id: int):
        payslip = container.payslip_service.mark_paid(payslip_id)
        return ok(payslip.to_dict(), message="Payslip marked as paid")

    @app.route("/api/payroll", methods=["GET"], endpoint="api_payroll_list")
    @requires(*MANAGERS)
    def list_for_period():
        organization_id = organization_scope(optional_int(request.args.get("organizationId"), "organizationId"))
        status = request.args.get("status")
        payslips = container.payslip_service.list_for_period(
            organization_id,
            month=request.args.get("month"),
            year=request.args.get("year"),
            status=require_choice(status, PayslipStatus, "status") if status else None,
        )
        return ok([p.to_dict() for p in payslips])

    @app.route("/api/payroll/summary", methods=["GET"], endpoint="api_payroll_summary")
    @requires(*MANAGERS)
    def summary():
        organization_id = organization_scope(optional_int(request.args.get("organizationId"), "organizationId"))
        result = container.payslip_service.period_summary(
            organization_id,
            month=request.args.get("month"),
            year=request.args.get("year"),
        )
        return ok(result.to_dict())

    @app.route("/api/payslips/<int:payslip_id>", methods=["GET"], endpoint="api_payslip_get")
    @requires(*MANAGERS, Capability.SELF, owner=payslip_owner(container))
    def get_payslip(payslip_id: int):
        return ok(container.payslip_service.get(payslip_id).to_dict())

    @app.route("/api/payslips/employee/<int:employee_id>", methods=["GET"], endpoint="api_payslips_for_employee")
    @requires(*MANAGERS, Capability.SELF, owner=employee_owner(container))
    def list_for_employee(employee_id: int):
        payslips = container.payslip_service.list_for_employee(employee_id)
        return ok([p.to_dict() for p in payslips])

    @app.route("/api/payslips/<int:payslip_id>", methods=["DELETE"], endpoint="api_payslip_void")
    @requires(*MANAGERS, owner=payslip_owner(container))
    def void(payslip_id: int):
        container.payslip_service.void(payslip_id)
        return ok(None, message="Payslip voided")
