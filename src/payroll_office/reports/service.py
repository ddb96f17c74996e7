from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.validators import require_month, require_year
from ..core.enums import AttendanceStatus, PayslipStatus, RequestStatus
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from ..leave.repository import LeaveRepository
from ..payroll.model import money
from ..payroll.repository import PayslipRepository


def _hhmm(hours: float) -> str:
    minutes = int(round(hours * 60))
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]

    def to_dict(self) -> dict:
        return {"rows": self.rows, "summary": self.summary}


class ReportService:
    """Read-only aggregates for the organization dashboard and reports."""

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        payslips: PayslipRepository,
    ):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._payslips = payslips

    def organization_dashboard(
        self,
        organization_id: int,
        *,
        today: date,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> dict:
        """Headcount, today's attendance, leave counts and the payroll of one period.

        The period defaults to the month containing `today`.
        """
        org = int(organization_id)
        month = require_month(month) if month is not None else today.month
        year = require_year(year) if year is not None else today.year
        total_employees = self._employees.count_active_for_organization(org)

        by_status = self._attendance.count_by_status(organization_id=org, work_date=today)
        present = by_status.get(AttendanceStatus.PRESENT, 0)
        late = by_status.get(AttendanceStatus.LATE, 0)
        absent = by_status.get(AttendanceStatus.ABSENT, 0)
        rate = round(present / total_employees * 100, 2) if total_employees else 0

        leave_counts = self._leaves.count_by_status(organization_id=org)

        totals = self._payslips.totals_by_status(org, month=month, year=year)
        # Rejected payslips are never paid; they are reported on their own.
        payable = [v for s, v in totals.items() if s != PayslipStatus.REJECTED]
        payroll_count = sum(n for n, _ in payable)
        payroll_amount = money(sum((amount for _, amount in payable), Decimal("0")))
        average_net = money(payroll_amount / payroll_count) if payroll_count else money(0)

        def _payroll(status: PayslipStatus) -> dict:
            n, amount = totals.get(status, (0, Decimal("0")))
            return {"count": n, "amount": str(money(amount))}

        return {
            "date": today.isoformat(),
            "period": {"month": month, "year": year},
            "employees": {"total": total_employees},
            "attendance": {
                "present": present,
                "absent": absent,
                "late": late,
                "attendance_rate": rate,
            },
            "leave": {s.value: int(leave_counts.get(s, 0)) for s in RequestStatus},
            "payroll": {
                "total": {"count": payroll_count, "amount": str(payroll_amount)},
                "pending": _payroll(PayslipStatus.PENDING),
                "approved": _payroll(PayslipStatus.APPROVED),
                "paid": _payroll(PayslipStatus.PAID),
                "rejected": _payroll(PayslipStatus.REJECTED),
                "average_net_salary": str(average_net),
            },
        }

    def attendance_report(
        self,
        organization_id: int,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("end must be on or after start")

        query_rows = self._attendance.get_report_rows(
            organization_id=int(organization_id),
            start_date=start,
            end_date=end,
            employee_id=employee_id,
        )

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            hours = max(r.working_hours or 0.0, 0.0)

            out_rows.append(
                {
                    "employee_id": r.employee_id,
                    "full_name": r.full_name,
                    "work_date": r.work_date.isoformat(),
                    "check_in": r.check_in_time.strftime("%H:%M") if r.check_in_time else "-",
                    "check_out": r.check_out_time.strftime("%H:%M") if r.check_out_time else "-",
                    "worked_hours": _hhmm(hours),
                    "status": r.status.value,
                }
            )

            s = summary_map.get(r.employee_id)
            if not s:
                s = {"employee_id": r.employee_id, "full_name": r.full_name, "days": 0, "hours": 0.0}
                summary_map[r.employee_id] = s
            s["days"] += 1
            s["hours"] += hours

        summary = [
            {
                "employee_id": s["employee_id"],
                "full_name": s["full_name"],
                "days": s["days"],
                "total_hours": _hhmm(s["hours"]),
                "hours": round(s["hours"], 2),
            }
            for s in summary_map.values()
        ]
        summary.sort(key=lambda x: x["hours"], reverse=True)
        return ReportData(rows=out_rows, summary=summary)
