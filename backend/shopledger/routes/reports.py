from flask import Blueprint, jsonify, request

from shopledger.services import reconciliation_service, reporting_service
from shopledger.services.state import current_ledger


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/summary")
def summary_report():
    summary = reconciliation_service.ledger_summary(current_ledger())
    return jsonify(summary.to_dict()), 200


@reports_bp.get("/products")
def product_report():
    return jsonify(reporting_service.product_breakdown(current_ledger())), 200


@reports_bp.get("/sales")
def sales_report():
    group_by = request.args.get("group_by", "day")
    start = request.args.get("start")
    end = request.args.get("end")

    try:
        report = reporting_service.sales_report(
            current_ledger(),
            start=start,
            end=end,
            group_by=group_by,
        )
        return jsonify(report), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400


@reports_bp.get("/expenses")
def expense_report():
    return jsonify(reporting_service.expense_breakdown(current_ledger())), 200
