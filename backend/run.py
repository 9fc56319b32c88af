from speedwurdz import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, host=app.config.get('HOST', '127.0.0.1'), port=int(app.config.get('PORT', 3000)), debug=True)
