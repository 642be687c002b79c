from django.contrib import admin

from bookings.models import (
    Booking,
    BookingForm,
    BookingFormCourse,
    BookingFormDelegate,
    Lead,
)


class BookingFormInline(admin.TabularInline):
    model = BookingForm
    fields = ["status", "expires_at", "invoice_number", "signed_at"]
    readonly_fields = ["signed_at"]
    extra = 0


class BookingFormCourseInline(admin.TabularInline):
    model = BookingFormCourse
    extra = 1


class BookingFormDelegateInline(admin.TabularInline):
    model = BookingFormDelegate
    exclude = ["email", "phone"]
    extra = 0


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    list_display = ["name", "company_name", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["name", "company_name", "email"]
    inlines = [BookingFormInline]


@admin.register(BookingForm)
class BookingFormAdmin(admin.ModelAdmin):
    list_display = ["lead", "status", "invoice_number", "expires_at", "signed_at"]
    list_filter = ["status"]
    readonly_fields = ["token", "signature_data", "signed_at"]
    inlines = [BookingFormCourseInline, BookingFormDelegateInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["lead", "course", "status", "invoice_no", "joining_instructions_sent"]
    list_filter = ["status", "joining_instructions_sent"]
