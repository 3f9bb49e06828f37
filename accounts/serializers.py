from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from django.contrib.auth import get_user_model
from distributors.models import Distributor
from distributors.serializers import DistributorSerializer

User = get_user_model()


class RoleTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Adds role and display name to the JWT; optionally checks the login screen's role."""
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False, write_only=True)

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        token['name'] = user.display_name
        if user.distributor_id:
            token['distributor_id'] = user.distributor_id
        return token

    def validate(self, attrs):
        role = attrs.pop('role', None)
        data = super().validate(attrs)
        if role and self.user.role != role:
            raise serializers.ValidationError({'role': f'This account cannot sign in as {role}.'})
        data['user'] = UserSerializer(self.user).data
        return data


class UserSerializer(serializers.ModelSerializer):
    distributor = DistributorSerializer(read_only=True)

    class Meta:
        model = User
        fields = ('id', 'username', 'email', 'role', 'phone', 'distributor', 'first_name', 'last_name', 'is_active')


class UserProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ('first_name', 'last_name', 'email', 'phone')
        extra_kwargs = {'email': {'required': False, 'allow_blank': True}}


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True, min_length=8)

    def validate_current_password(self, value):
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError('Current password is incorrect.')
        return value

class UserCreateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)
    distributor = serializers.PrimaryKeyRelatedField(queryset=Distributor.objects.all(), required=False, allow_null=True)

    class Meta:
        model = User
        fields = ('username', 'password', 'email', 'role', 'phone', 'first_name', 'last_name', 'distributor')

    def validate(self, attrs):
        if attrs.get('role') == User.DISTRIBUTOR and not attrs.get('distributor'):
            raise serializers.ValidationError({'distributor': 'Distributor logins must be linked to a distributor.'})
        return attrs

    def create(self, validated_data):
        user = User.objects.create_user(**validated_data)
        return user


class UserUpdateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False, allow_blank=True)

    class Meta:
        model = User
        fields = ('username', 'password', 'email', 'phone', 'first_name', 'last_name', 'is_active')

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        # Blank password on edit means "keep the current one"
        if password and password.strip():
            instance.set_password(password)
        instance.save()
        return instance


class RegisterDistributorSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)
    distributor_name = serializers.CharField()
    company_name = serializers.CharField()
    contact = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=Distributor.STATUS_CHOICES, required=False)

    def validate_username(self, value):
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError('Username is already taken.')
        return value

    def create(self, validated_data):
        distributor = Distributor.objects.create(
            distributor_name=validated_data['distributor_name'],
            company_name=validated_data['company_name'],
            contact=validated_data.get('contact', ''),
            status=validated_data.get('status', Distributor.ACTIVE),
        )

        user = User.objects.create_user(
            username=validated_data['username'],
            password=validated_data['password'],
            role=User.DISTRIBUTOR,
            distributor=distributor
        )
        return user
