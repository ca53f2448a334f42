from typing import Dict, List


def extract_weather_info(weather_data: Dict) -> Dict:
    """
    Extract the fields the API exposes from a current weather document

    Args:
        weather_data: Raw /weather document

    Returns:
        Formatted data for the response
    """
    if not weather_data:
        return {}

    main = weather_data.get('main', {})
    weather = (weather_data.get('weather') or [{}])[0]

    return {
        'location': weather_data.get('name', 'Unknown'),
        'temperature': main.get('temp'),
        'description': weather.get('description', ''),
        'humidity': main.get('humidity'),
        'windSpeed': weather_data.get('wind', {}).get('speed'),
    }


def extract_forecast_info(forecast_data: Dict) -> Dict:
    return {
        'city': forecast_data.get('city'),
        'forecasts': forecast_data.get('list', []),
    }


def extract_daily_forecast_info(forecast_data: Dict) -> Dict:
    days = []
    for day in forecast_data.get('list', []):
        temp = day.get('temp', {})
        weather = (day.get('weather') or [{}])[0]
        days.append({
            'date': day.get('dt'),
            'min': temp.get('min'),
            'max': temp.get('max'),
            'description': weather.get('description', ''),
            'humidity': day.get('humidity'),
        })

    return {
        'city': forecast_data.get('city'),
        'days': days,
    }


def extract_air_quality_info(air_data: Dict) -> Dict:
    entry = (air_data.get('list') or [{}])[0]
    return {
        'coordinates': air_data.get('coord'),
        'aqi': entry.get('main', {}).get('aqi'),
        'components': entry.get('components', {}),
        'timestamp': entry.get('dt'),
    }


def extract_group_info(group_data: Dict) -> List[Dict]:
    return [extract_weather_info(item) for item in group_data.get('list', [])]
