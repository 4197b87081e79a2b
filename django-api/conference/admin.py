from django.contrib import admin

from conference.models import Document


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ["path", "updated_at"]
    search_fields = ["path"]
    readonly_fields = ["created_at", "updated_at"]
