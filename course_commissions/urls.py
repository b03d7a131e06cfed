from django.urls import path
from . import views

app_name = 'course_commissions'

urlpatterns = [
    # Dashboard
    path('', views.dashboard, name='dashboard'),

    # Payment ledger
    path('courses/<int:course_id>/payment/', views.payment_update, name='payment_update'),
    path('courses/<int:course_id>/payments/add/', views.payment_add, name='payment_add'),
    path('courses/<int:course_id>/payments/<int:index>/edit/', views.payment_edit, name='payment_edit'),
    path('courses/<int:course_id>/payments/<int:index>/delete/', views.payment_delete, name='payment_delete'),

    # Rates
    path('rates/apply/', views.rates_apply, name='rates_apply'),
    path('rates/save/', views.rates_save, name='rates_save'),

    # Export
    path('export/', views.export_ranking, name='export'),

    # API
    path('api/ranking/', views.api_ranking, name='api_ranking'),
    path('api/courses/<int:course_id>/summary/', views.api_course_summary, name='api_course_summary'),
]
