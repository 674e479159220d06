import logging
from argparse import ArgumentParser, Namespace
from signal import signal, SIGINT
from threading import Event

from fluidsim.flow.fluid import FluidEngine, VARIANTS


def run_headless(engine: FluidEngine, frames: int, delta_time: float, random_splats: int, save: str | None) -> None:
    if random_splats > 0:
        engine.add_random_splats(random_splats)
    for _ in range(frames):
        engine.update(delta_time)
    logging.info(f"Simulated {engine.frame} frames ({engine.time:.2f} s)")

    if save:
        import cv2
        image = engine.get_image()
        cv2.imwrite(save, cv2.cvtColor(image, cv2.COLOR_RGB2BGR))
        logging.info(f"Saved display to {save}")


def run_window(engine: FluidEngine, window_width: int, window_height: int, fps: float | None, random_splats: int) -> None:
    from fluidsim.gl import FluidWindow

    if random_splats > 0:
        engine.add_random_splats(random_splats)

    window = FluidWindow(engine, window_width, window_height, fps=int(fps) if fps else None)
    shutdown_event = Event()
    window.addExitCallback(shutdown_event.set)

    def signal_handler_exit(sig, frame) -> None:
        logging.info("Received interrupt signal, shutting down...")
        shutdown_event.set()
        window.stop()

    signal(SIGINT, signal_handler_exit)
    window.start()

    while window.is_running and not shutdown_event.is_set():
        shutdown_event.wait(0.01)


def main() -> None:
    parser: ArgumentParser = ArgumentParser(description='Real-time 2D fluid simulation')
    parser.add_argument('-v',   '--variant',        type=str,   default='fluid',    choices=list(VARIANTS), help='simulation variant')
    parser.add_argument('-W',   '--width',          type=int,   default=256,        help='grid width in cells')
    parser.add_argument('-H',   '--height',         type=int,   default=256,        help='grid height in cells')
    parser.add_argument('-d',   '--device',         type=str,   default=None,       help='torch device, defaults to cuda when available')
    parser.add_argument('-ws',  '--window-size',    type=int,   default=768,        help='window height in pixels')
    parser.add_argument('-fps', '--fps',            type=float, default=None,       help='frame rate cap, v-sync when omitted')
    parser.add_argument('-rs',  '--random-splats',  type=int,   default=5,          help='random splats added at start')
    parser.add_argument('-hl',  '--headless',       type=int,   default=0,          help='run this many frames without a window')
    parser.add_argument('-dt',  '--delta-time',     type=float, default=1.0 / 60.0, help='frame time step for headless runs')
    parser.add_argument('-o',   '--save',           type=str,   default=None,       help='write the final display image (headless)')
    parser.add_argument('-l',   '--log-level',      type=str,   default='INFO',     help='logging level')

    args: Namespace = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format='%(asctime)s %(levelname)s %(message)s')

    with FluidEngine(args.width, args.height, args.variant, device=args.device) as engine:
        if args.headless > 0:
            run_headless(engine, args.headless, args.delta_time, args.random_splats, args.save)
        else:
            window_width = int(args.window_size * engine.aspect)
            run_window(engine, window_width, args.window_size, args.fps, args.random_splats)


if __name__ == '__main__':
    main()
