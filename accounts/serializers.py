from rest_framework import serializers
from django.contrib.auth import get_user_model, authenticate
from rest_framework.exceptions import AuthenticationFailed

User = get_user_model()


class UserSerializer:
    class SignupSerializer(serializers.ModelSerializer):
        password = serializers.CharField(max_length=128, min_length=8, write_only=True)
        role = serializers.ChoiceField(choices=['participant', 'organizer'], default='participant', write_only=True)

        class Meta:
            model = User
            fields = ['username', 'email', 'password', 'first_name', 'last_name', 'role']
            extra_kwargs = {
                'first_name': {'required': False},
                'last_name': {'required': False},
            }

        def validate(self, data):
            # Check for unique email and username
            if User.objects.filter(email__iexact=data['email']).exists():
                raise serializers.ValidationError({"email": "This email is already in use."})
            if User.objects.filter(username=data['username']).exists():
                raise serializers.ValidationError({"username": "This username is already taken."})
            return data

        def create(self, validated_data):
            role = validated_data.pop('role', 'participant')
            return User.objects.create_user(
                username=validated_data['username'],
                email=validated_data['email'],
                password=validated_data['password'],
                first_name=validated_data.get('first_name', ''),
                last_name=validated_data.get('last_name', ''),
                is_participant=True,
                is_organizer=role == 'organizer',
                is_admin=False
            )

    class LoginSerializer(serializers.Serializer):
        username = serializers.CharField()
        password = serializers.CharField(write_only=True)
        access_token = serializers.CharField(read_only=True)
        refresh_token = serializers.CharField(read_only=True)

        def validate(self, data):
            user = authenticate(username=data['username'], password=data['password'], request=self.context.get('request'))
            if not user:
                raise AuthenticationFailed("Invalid credentials")
            user_tokens = user.tokens()
            return {
                'id': user.id,
                'access_token': user_tokens['access'],
                'refresh_token': user_tokens['refresh']
            }

    class RetrieveSerializer(serializers.ModelSerializer):
        role = serializers.CharField(read_only=True)

        class Meta:
            model = User
            fields = [
                'id', 'username', 'email', 'first_name', 'last_name', 'role',
                'is_participant', 'is_organizer', 'is_admin', 'is_active', 'date_joined'
            ]


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'email']
