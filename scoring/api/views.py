from django.utils import timezone
from rest_framework import views, status
from rest_framework.response import Response
import structlog
import uuid
from studytrack.context import Credentials
from ..services import sessions
from .serializers import SessionInSerializer, SessionSerializer, SimulateInSerializer, StatsSerializer

base_logger = structlog.get_logger()


class SessionListView(views.APIView):
    def get(self, request):
        credentials = Credentials.from_user(request.user)
        history = sessions.list_sessions(credentials)
        return Response({"sessions": SessionSerializer(history, many=True).data})

    def post(self, request):
        credentials = Credentials.from_user(request.user)
        logger = base_logger.bind(request_id=str(uuid.uuid4()), user_id=str(credentials.user_id))

        s = SessionInSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        session, was_idem = sessions.save_session(credentials, **s.validated_data)
        status_code = status.HTTP_200_OK if was_idem else status.HTTP_201_CREATED

        logger.info(
            "session_api_response",
            session_id=session.pk,
            idempotent=was_idem,
            xp=session.xp_earned,
            streak=session.streak_count,
            user_level=session.level,
            status=status_code,
        )

        data = SessionSerializer(session).data
        data["idempotent"] = was_idem
        return Response(data, status=status_code)


class SimulateSessionView(views.APIView):
    def post(self, request):
        credentials = Credentials.from_user(request.user)
        s = SimulateInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        session_start = s.validated_data.get("session_start") or timezone.now()
        return Response(sessions.simulate_session(credentials, session_start))


class StatsView(views.APIView):
    def get(self, request):
        credentials = Credentials.from_user(request.user)
        return Response(StatsSerializer(sessions.get_user_stats(credentials)).data)


class ResetProgressView(views.APIView):
    def post(self, request):
        credentials = Credentials.from_user(request.user)
        progress = sessions.reset_user_progress(credentials)
        return Response(
            {"reset_at": progress.reset_at.isoformat(), "version": progress.version},
            status=status.HTTP_200_OK,
        )
