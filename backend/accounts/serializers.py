from django.contrib.auth import authenticate
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from .models import User
from .permission_defaults import ASSIGNABLE_LEVELS
from .permissions import access_level_for


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("id", "email", "name")


class UserAccessRowSerializer(serializers.ModelSerializer):
    access_level = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ("id", "email", "name", "access_level")

    def get_access_level(self, obj) -> str:
        return access_level_for(obj)


class RegistrationSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    password = serializers.CharField(min_length=8, write_only=True)

    def validate_email(self, value: str):
        value = User.objects.normalize_email(value)
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data["email"],
            name=validated_data.get("name", ""),
            password=validated_data["password"],
        )

    def to_representation(self, instance):
        refresh = RefreshToken.for_user(instance)
        return {"access": str(refresh.access_token), "refresh": str(refresh)}


class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):
    username_field = User.EMAIL_FIELD

    def validate(self, attrs):
        authenticate_kwargs = {
            self.username_field: attrs.get("email"),
            "password": attrs.get("password"),
        }
        user = authenticate(request=self.context.get("request"), **authenticate_kwargs)
        if not user:
            raise AuthenticationFailed("Invalid credentials")
        refresh = RefreshToken.for_user(user)
        return {"access": str(refresh.access_token), "refresh": str(refresh)}


class SetAccessLevelSerializer(serializers.Serializer):
    # Membership is checked by set_access_level so the error text stays uniform.
    access_level = serializers.CharField(allow_blank=True)


class AccessLevelSerializer(serializers.Serializer):
    access_level = serializers.CharField()
    assignable = serializers.ListField(child=serializers.CharField(), default=list(ASSIGNABLE_LEVELS))
