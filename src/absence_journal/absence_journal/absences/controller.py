from __future__ import annotations

import csv
import inspect
import io
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, PersistenceError, ValidationError
from ..container import Container
from ..identity.model import CurrentUser
from ..reports.service import REPORT_FIELDS
from .model import AttendanceRecord, ClassBucket


def register(app: Flask, container: Container) -> None:
    service = container.absence_service

    def _fail(message: str, status: int):
        return jsonify({"success": False, "message": message}), status

    def login_required(view):
        # async views keep an async wrapper so Flask still awaits them
        if inspect.iscoroutinefunction(view):

            @wraps(view)
            async def async_wrapper(*args, **kwargs):
                if "user_id" not in session:
                    return _fail("Требуется вход в систему", 401)
                return await view(*args, **kwargs)

            return async_wrapper

        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return _fail("Требуется вход в систему", 401)
            return view(*args, **kwargs)

        return wrapper

    def _current_user() -> CurrentUser:
        try:
            role = Role(session.get("role"))
        except ValueError:
            role = Role.VIEWER
        return CurrentUser(user_id=str(session["user_id"]), email=session.get("email"), role=role)

    def _record_to_ui(record: AttendanceRecord) -> dict:
        return {
            "record_id": record.record_id,
            "date": format_iso_date(record.record_date),
            "class_id": record.class_id,
            "class_name": service.class_name(record.class_id),
            "absences": [
                {
                    "student_name": a.student_name,
                    "reason": a.reason.value,
                    "other_reason": a.other_reason,
                    "label": a.label,
                }
                for a in record.absences
            ],
            "summary": service.record_summary(record),
            "entered_by": service.entered_by_name(record),
            "entered_at": record.entered_at.isoformat(),
            "updated_at": record.updated_at.isoformat(),
            "updated_by": record.updated_by,
        }

    def _bucket_to_ui(bucket: ClassBucket) -> dict:
        return {
            "class_id": bucket.class_id,
            "class_name": bucket.class_name,
            "total": bucket.total,
            "reasons": [{"label": label, "count": count} for label, count in bucket.reasons],
        }

    def _period_from_args():
        return service.periods.parse(request.args.get("period", "day"), request.args.get("value", ""))

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return _fail(str(e), 400)

    @app.errorhandler(AuthorizationError)
    def handle_forbidden(e: AuthorizationError):
        return _fail(str(e), 403)

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return _fail(str(e), 404)

    @app.errorhandler(PersistenceError)
    def handle_persistence(e: PersistenceError):
        return _fail(str(e), 502)

    @app.route("/api/absences/day", methods=["GET"], endpoint="absences_day")
    @login_required
    def absences_day():
        day = parse_iso_date(request.args.get("date", ""))
        result = service.classify_day(day)
        return jsonify(
            {
                "success": True,
                "date": format_iso_date(day),
                "pending": [{"class_id": c.class_id, "class_name": c.name} for c in result.pending],
                "submitted": [_record_to_ui(s.record) for s in result.submitted],
                "is_complete": result.is_complete,
            }
        )

    @app.route("/api/absences/stats", methods=["GET"], endpoint="absences_stats")
    @login_required
    def absences_stats():
        period = _period_from_args()
        buckets = service.stats_for(period)
        return jsonify(
            {
                "success": True,
                "period": period.kind.value,
                "value": period.value(),
                "label": period.label(),
                "buckets": [_bucket_to_ui(b) for b in buckets],
            }
        )

    @app.route("/api/absences/report.csv", methods=["GET"], endpoint="absences_report_csv")
    @login_required
    def absences_report_csv():
        period = _period_from_args()
        data = container.report_service.build(period)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)
        writer.writerow({"class_name": "Итого", "total": data.grand_total, "reasons": ""})

        filename = f"absences_{period.kind.value}_{period.value()}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/absences", methods=["POST"], endpoint="absences_save")
    @login_required
    async def absences_save():
        user = _current_user()
        if not user.can_edit:
            raise AuthorizationError("Недостаточно прав для изменения данных")

        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            raise ValidationError("Некорректный запрос")
        items = data.get("absences") or []
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise ValidationError("Некорректный список отсутствующих")
        record_id = data.get("record_id")

        editor = service.editor
        if record_id:
            editing = editor.clear_absentees(service.open_edit(str(record_id)))
            record_date = editing.record.record_date
        else:
            record_date = parse_iso_date(data.get("date", ""))
            editing = editor.start_new(data.get("class_id"))

        for item in items:
            editing = editor.add_absentee(
                editing,
                item.get("student_name"),
                item.get("reason", ""),
                item.get("other_reason"),
            )

        record = (await service.save(editing, record_date=record_date, user=user)).record
        message = "Запись обновлена" if record_id else "Запись сохранена"
        return jsonify({"success": True, "message": message, "record": _record_to_ui(record)}), (200 if record_id else 201)

    @app.route("/api/absences/<record_id>", methods=["DELETE"], endpoint="absences_delete")
    @login_required
    async def absences_delete(record_id: str):
        confirmed = request.args.get("confirm") in {"1", "true", "yes"}
        await service.delete(record_id, user=_current_user(), confirmed=confirmed)
        return jsonify({"success": True, "message": "Запись удалена"})
