# src/model.py
import torch
import torch.nn as nn


class GestureCNN(nn.Module):
    def __init__(self, num_classes=26, in_channels=3, base_channels=32, dropout=0.3):
        super(GestureCNN, self).__init__()

        # three conv blocks, each halving the spatial size
        self.features = nn.Sequential(
            self._block(in_channels, base_channels),
            self._block(base_channels, base_channels * 2),
            self._block(base_channels * 2, base_channels * 4),
        )
        self.pool = nn.AdaptiveAvgPool2d(1)

        # classifier
        self.dropout = nn.Dropout(dropout)
        self.fc = nn.Linear(base_channels * 4, num_classes)

    @staticmethod
    def _block(in_channels, out_channels):
        return nn.Sequential(
            nn.Conv2d(in_channels, out_channels, kernel_size=3, padding=1),
            nn.BatchNorm2d(out_channels),
            nn.ReLU(inplace=True),
            nn.MaxPool2d(2),
        )

    def forward(self, x):
        # x: [batch, 3, height, width], values in [0, 1]
        out = self.features(x)
        out = self.pool(out).flatten(1)   # [batch, channels]
        out = self.fc(self.dropout(out))  # [batch, num_classes]
        return out


def load_classifier(model_path, num_classes, device=None):
    device = device or torch.device("cuda" if torch.cuda.is_available() else "cpu")
    model = GestureCNN(num_classes=num_classes).to(device)
    model.load_state_dict(torch.load(model_path, map_location=device))
    model.eval()
    return model
