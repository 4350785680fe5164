import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


class UserSignupView(GenericAPIView):
    permission_classes = [AllowAny]
    serializer_class = UserSerializer.SignupSerializer

    @swagger_auto_schema(
        request_body=UserSerializer.SignupSerializer,
        responses={
            201: "User created, tokens returned",
            400: "Bad Request"
        },
        operation_description="Create an account and return a token pair.",
        tags=['account']
    )
    def post(self, request):
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        tokens = user.tokens()
        logger.info(f"Created user {user.id} ({user.role})")
        return Response(
            {
                "message": "User registered successfully.",
                "access_token": tokens['access'],
                "refresh_token": tokens['refresh'],
                "user_id": user.id
            },
            status=status.HTTP_201_CREATED
        )


class UserLoginView(GenericAPIView):
    permission_classes = [AllowAny]
    serializer_class = UserSerializer.LoginSerializer

    @swagger_auto_schema(
        request_body=UserSerializer.LoginSerializer,
        responses={
            200: UserSerializer.LoginSerializer,
            401: "Unauthorized"
        },
        operation_description="Log in a user and return tokens.",
        tags=['account']
    )
    def post(self, request):
        serializer = self.serializer_class(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return Response(
            {
                "message": "Login successful.",
                "access_token": data["access_token"],
                "refresh_token": data["refresh_token"],
                "user_id": data["id"]
            },
            status=status.HTTP_200_OK
        )


class CurrentUserView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer.RetrieveSerializer

    @swagger_auto_schema(
        responses={200: UserSerializer.RetrieveSerializer, 401: "Unauthorized"},
        operation_description="Retrieve the authenticated user.",
        tags=['account']
    )
    def get(self, request):
        return Response({"user": self.serializer_class(request.user).data}, status=status.HTTP_200_OK)
