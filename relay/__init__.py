# Image Mail Relay
