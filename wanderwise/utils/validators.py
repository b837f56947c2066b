import re
from typing import List, Dict, Any, Optional
from datetime import date
from wanderwise.models.request_models import DateRange, TripPreferences

KNOWN_DIETARY = [
    'vegetarian', 'vegan', 'gluten-free', 'dairy-free', 'nut-free',
    'kosher', 'halal', 'pescatarian', 'keto', 'paleo'
]

class TripPreferencesValidator:
    """Request-level checks run before any generation call"""

    @staticmethod
    def validate_destination(destination: Optional[str]) -> bool:
        """Validate destination string (allow common punctuation like commas)."""
        if not destination or len(destination.strip()) < 2:
            return False
        # e.g. "Paris, France", "St. John's", "São Paulo", "Queens (NY)"
        pattern = r"^[\w\s\-\'\.,&()/]+$"
        return re.match(pattern, destination.strip()) is not None

    @staticmethod
    def validate_duration(duration: int, max_days: int) -> List[str]:
        errors = []
        if duration < 1:
            errors.append("Trip must be at least 1 day long")
        if duration > max_days:
            errors.append(f"Trip duration cannot exceed {max_days} days")
        return errors

    @staticmethod
    def validate_dates(dates: Optional[DateRange], duration: int) -> Dict[str, Any]:
        """Dates are optional; when both ends are given they should cover the duration"""
        errors = []
        warnings = []
        if dates and dates.start_date:
            if dates.start_date < date.today():
                warnings.append("Start date is in the past")
            if dates.end_date:
                span = (dates.end_date - dates.start_date).days + 1
                if span != duration:
                    warnings.append(f"Date range covers {span} days but duration is {duration}")
        return {'valid': len(errors) == 0, 'errors': errors, 'warnings': warnings}

    @staticmethod
    def validate_dietary(dietary: List[str]) -> List[str]:
        return [
            f"Unknown dietary restriction: {restriction}"
            for restriction in dietary
            if restriction.lower() not in KNOWN_DIETARY
        ]

    @staticmethod
    def validate_complete_request(preferences: TripPreferences, max_days: int = 30) -> Dict[str, Any]:
        """Validate a complete itinerary request"""
        all_errors = []
        all_warnings = []

        if preferences.destination:
            if not TripPreferencesValidator.validate_destination(preferences.destination):
                all_errors.append("Invalid destination")
        elif not (preferences.ideal_destination and preferences.ideal_destination.strip()):
            all_errors.append("Please enter a destination or describe your ideal destination")

        all_errors.extend(TripPreferencesValidator.validate_duration(preferences.duration, max_days))

        date_validation = TripPreferencesValidator.validate_dates(preferences.dates, preferences.duration)
        all_errors.extend(date_validation['errors'])
        all_warnings.extend(date_validation['warnings'])

        all_warnings.extend(TripPreferencesValidator.validate_dietary(preferences.dietary))

        return {
            'valid': len(all_errors) == 0,
            'errors': all_errors,
            'warnings': all_warnings,
        }
