from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask, request

from ..auth.capabilities import Capability, organization_scope, requires
from ..common.datetime_utils import now_utc, parse_iso_date, utc_day
from ..web.responses import ok, optional_int

if TYPE_CHECKING:
    from ..container import Container


def register(app: Flask, container: "Container") -> None:
    @app.route("/api/reports/dashboard", methods=["GET"], endpoint="api_reports_dashboard")
    @requires(Capability.ADMIN, Capability.ORG_MANAGER)
    def dashboard():
        organization_id = organization_scope(optional_int(request.args.get("organizationId"), "organizationId"))
        data = container.report_service.organization_dashboard(
            organization_id,
            today=utc_day(now_utc()),
            month=optional_int(request.args.get("month"), "month"),
            year=optional_int(request.args.get("year"), "year"),
        )
        return ok(data)

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="api_reports_attendance")
    @requires(Capability.ADMIN, Capability.ORG_MANAGER)
    def attendance_report():
        organization_id = organization_scope(optional_int(request.args.get("organizationId"), "organizationId"))
        report = container.report_service.attendance_report(
            organization_id,
            start=parse_iso_date(request.args.get("start")),
            end=parse_iso_date(request.args.get("end")),
            employee_id=optional_int(request.args.get("employeeId"), "employeeId"),
        )
        return ok(report.to_dict())
