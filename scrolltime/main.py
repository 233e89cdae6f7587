import asyncio

from scrolltime.engine import ScrollTimeEngine
from scrolltime.log import log
from scrolltime.scroll_calendar import gate_closing_time, scroll_day


def render(state, engine):
    text = (
        f'eHour {state.current_segment_index}/{state.segment_count} {state.phase.name} '
        f'{state.countdown()} remaining, {state.progress_fraction:.0%}')

    if engine.using_default_timing:
        text += ' (using default timing)'

    return text


def loop_crash_hook(loop, context):
    import os
    import traceback

    exc = context.get('exception')
    if exc is not None:
        log.print(''.join(traceback.format_exception(exc)))
    log.print(f'Exiting due to unhandled error: {context.get("message")}')
    os._exit(1)


async def run():
    asyncio.get_running_loop().set_exception_handler(loop_crash_hook)

    engine = ScrollTimeEngine()
    log.print('resolving location and sun events...')

    async with engine:
        sday = scroll_day(engine.sun_events.date_key)
        log.print(
            f'scroll day {sday.day_number}, week {sday.week}, {sday.gate}'
            + (' (sabbath)' if sday.sabbath else '')
            + f', gate closes {gate_closing_time(engine.tz):%Y-%m-%d %H:%M}')
        log.print(
            f'sunrise {engine.sun_events.sunrise.astimezone(engine.tz):%H:%M}, '
            f'sunset {engine.sun_events.sunset.astimezone(engine.tz):%H:%M}')

        engine.subscribe(lambda state: log.print_ticker(render(state, engine)))

        await asyncio.Event().wait()


if __name__ == '__main__':
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        log.print('stopped')
