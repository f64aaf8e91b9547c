import click

from buzzer import create_app, socketio

app = create_app()


@click.command()
@click.option('--host', default='0.0.0.0', show_default=True)
@click.option('--port', default=None, type=int, help='Defaults to the PORT setting.')
@click.option('--debug', is_flag=True, default=False)
def main(host, port, debug):
    """Run the buzzer Socket.IO server."""
    port = port or app.config['PORT']
    app.logger.info(f"[startup] Socket.IO server running on {host}:{port}")
    socketio.run(app, host=host, port=port, debug=debug, allow_unsafe_werkzeug=debug)


if __name__ == '__main__':
    main()
