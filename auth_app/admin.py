from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.contrib.auth import get_user_model
from auth_app.models import Profile

User = get_user_model()

# replace the built-in registration so the role is editable next to the user
admin.site.unregister(User)


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    fields = ('role', 'created_at')
    readonly_fields = ('created_at',)


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """
    Customizes the built-in User admin to show the primary key (ID) and the platform role.
    """
    inlines = (ProfileInline,)
    list_display = (
        'id',
        'username',
        'email',
        'role',
        'is_staff',
        'is_active',
        'date_joined',
    )
    search_fields = ('username', 'email')
    list_filter = ('profile__role', 'is_staff', 'is_superuser', 'is_active')
    readonly_fields = ('id',)

    fieldsets = (
        (None, {'fields': ('id', 'username', 'password')}),
        ('Personal info', {'fields': ('first_name', 'last_name', 'email')}),
        ('Permissions', {'fields': (
            'is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'
        )}),
        ('Important dates', {'fields': ('last_login', 'date_joined')}),
    )

    @admin.display(description='Role', ordering='profile__role')
    def role(self, obj):
        profile = getattr(obj, 'profile', None)
        return profile.role if profile else Profile.Role.STUDENT
