#!/usr/bin/env python3
"""
MTG ECOREC - Combo discovery service
Main Flask application entry point.
"""
import os

from app import app

if __name__ == '__main__':
    app.run(debug=os.environ.get('FLASK_DEBUG') == '1', host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
