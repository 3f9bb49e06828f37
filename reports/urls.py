from django.urls import path
from .views import (
    MonthlyReportView,
    AdminDashboardStatsView,
    SalesByProductReport,
    OutstandingByDistributorReport,
)

urlpatterns = [
    path('monthly/', MonthlyReportView.as_view(), name='monthly_report'),
    path('dashboard-stats/', AdminDashboardStatsView.as_view(), name='admin_dashboard_stats'),
    path('sales-by-product/', SalesByProductReport.as_view(), name='sales_by_product'),
    path('outstanding/', OutstandingByDistributorReport.as_view(), name='outstanding_by_distributor'),
]
