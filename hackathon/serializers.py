from rest_framework import serializers
from django.db import transaction

from accounts.serializers import UserSummarySerializer
from utils.clock import system_clock
from . import rules
from .models import Hackathon, Prize, JudgingCriterion


class PrizeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Prize
        fields = ['position', 'amount', 'description']


class JudgingCriterionSerializer(serializers.ModelSerializer):
    class Meta:
        model = JudgingCriterion
        fields = ['criterion', 'weight']


class HackathonSerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)
    prizes = PrizeSerializer(many=True, read_only=True)
    judging_criteria = JudgingCriterionSerializer(many=True, read_only=True)
    registration_status = serializers.SerializerMethodField()
    current_status = serializers.SerializerMethodField()
    duration_days = serializers.SerializerMethodField()

    class Meta:
        model = Hackathon
        fields = '__all__'

    def _now(self):
        now = self.context.get('now')
        return now if now is not None else system_clock.now()

    def get_registration_status(self, obj):
        return rules.registration_status(obj, self._now())

    def get_current_status(self, obj):
        return rules.temporal_status(obj, self._now())

    def get_duration_days(self, obj):
        return rules.duration_days(obj)


class HackathonWriteSerializer(serializers.ModelSerializer):
    prizes = PrizeSerializer(many=True, required=False)
    judging_criteria = JudgingCriterionSerializer(many=True, required=False)
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    special_features = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta:
        model = Hackathon
        fields = [
            'title', 'short_description', 'detailed_description', 'theme', 'tags',
            'start_date', 'end_date', 'registration_deadline', 'location', 'venue', 'mode',
            'team_size_min', 'team_size_max', 'max_participants', 'eligibility', 'skill_level',
            'total_prize_pool', 'prizes', 'judging_criteria', 'resources', 'rules', 'schedule',
            'organizer_name', 'organizer_email', 'organizer_phone', 'website', 'social_media',
            'status', 'is_published', 'allow_team_formation', 'require_resume', 'enable_mentorship',
            'enable_workshops', 'special_features'
        ]

    def validate_title(self, value):
        return value.strip()

    def validate_tags(self, value):
        return [tag.strip() for tag in value if tag.strip()]

    def validate_social_media(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Social media must be an object.")
        allowed = {'twitter', 'linkedin', 'instagram', 'discord'}
        unknown = set(value) - allowed
        if unknown:
            raise serializers.ValidationError(f"Unsupported social media keys: {', '.join(sorted(unknown))}.")
        return value

    def _merged_definition(self, data):
        instance = self.instance
        names = ['start_date', 'end_date', 'registration_deadline', 'team_size_min', 'team_size_max', 'max_participants']
        definition = {}
        for name in names:
            if name in data:
                definition[name] = data[name]
            elif instance is not None:
                definition[name] = getattr(instance, name)
        if 'judging_criteria' in data:
            definition['judging_criteria'] = data['judging_criteria']
        elif instance is not None:
            definition['judging_criteria'] = list(instance.judging_criteria.all())
        return definition

    def validate(self, data):
        violations = rules.validate_hackathon(self._merged_definition(data))
        if violations:
            errors = {}
            for violation in violations:
                errors.setdefault(violation.field, []).append(violation.message)
            raise serializers.ValidationError(errors)

        target = data.get('status')
        if target is None and 'is_published' in data:
            target = rules.PUBLISHED if data['is_published'] else rules.DRAFT
        if target is None:
            return data

        if self.instance is None:
            if target not in (rules.DRAFT, rules.PUBLISHED):
                raise serializers.ValidationError({"status": "A new hackathon must be saved as draft or published."})
        elif not rules.can_change_status(self.instance, target):
            raise serializers.ValidationError(
                {"status": f"Cannot change hackathon status from {self.instance.status} to {target}."}
            )

        data['status'] = target
        if target in (rules.DRAFT, rules.PUBLISHED):
            data['is_published'] = target == rules.PUBLISHED
            data['is_draft'] = target == rules.DRAFT
        return data

    @transaction.atomic
    def create(self, validated_data):
        prizes = validated_data.pop('prizes', [])
        criteria = validated_data.pop('judging_criteria', [])
        if 'status' not in validated_data:
            validated_data['status'] = rules.PUBLISHED if validated_data.get('is_published') else rules.DRAFT
        hackathon = Hackathon.objects.create(**validated_data)
        for prize in prizes:
            Prize.objects.create(hackathon=hackathon, **prize)
        for criterion in criteria:
            JudgingCriterion.objects.create(hackathon=hackathon, **criterion)
        return hackathon

    @transaction.atomic
    def update(self, instance, validated_data):
        prizes = validated_data.pop('prizes', None)
        criteria = validated_data.pop('judging_criteria', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()

        if prizes is not None:
            instance.prizes.all().delete()
            for prize in prizes:
                Prize.objects.create(hackathon=instance, **prize)
        if criteria is not None:
            instance.judging_criteria.all().delete()
            for criterion in criteria:
                JudgingCriterion.objects.create(hackathon=instance, **criterion)
        return instance
